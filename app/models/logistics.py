"""Shipments and the rate card used to price them"""

from sqlalchemy import Column, String, Numeric, Date, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from app.models.base import BaseModel
from app.models.enums import ServiceType


class Shipment(BaseModel):
    """A consignment tracked by its AWB reference."""
    __tablename__ = "shipments"

    shipment_ref = Column(String(64), unique=True, nullable=False, index=True)
    customer_id = Column(
        UUID(as_uuid=True),
        ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    origin = Column(String(120), nullable=True)
    destination = Column(String(120), nullable=True)
    weight = Column(Numeric(10, 2), nullable=True)  # kg
    service_type = Column(String(32), nullable=False, default=ServiceType.STANDARD.value)
    status = Column(String(32), nullable=True)

    customer = relationship("Customer", back_populates="shipments")

    def __repr__(self) -> str:
        return f"<Shipment {self.shipment_ref}>"


class Rate(BaseModel):
    """
    Pricing lane. A null service_type applies to every service on the lane;
    effective_date, when set, delays the rate until that day.
    """
    __tablename__ = "rates"

    origin = Column(String(120), nullable=False)
    destination = Column(String(120), nullable=False)
    service_type = Column(String(32), nullable=True)
    rate_per_kg = Column(Numeric(10, 2), nullable=False, default=0)
    base_fee = Column(Numeric(10, 2), nullable=False, default=0)
    min_weight = Column(Numeric(10, 2), nullable=False, default=0)
    effective_date = Column(Date, nullable=True)

    __table_args__ = (
        Index("ix_rates_lane", "origin", "destination", "service_type"),
    )

    def __repr__(self) -> str:
        return f"<Rate {self.origin}->{self.destination} {self.service_type or '*'}>"
