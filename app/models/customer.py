"""Customer Model"""

from sqlalchemy import Column, String, Text
from sqlalchemy.orm import relationship

from app.models.base import BaseModel


class Customer(BaseModel):
    """
    Billable party. Referenced by shipments and invoices, so it can only be
    deleted while nothing points at it.
    """
    __tablename__ = "customers"

    name = Column(String(255), nullable=False)
    phone = Column(String(32), nullable=True)
    email = Column(String(255), nullable=True)
    address = Column(Text, nullable=True)
    city = Column(String(120), nullable=True)

    # Relationships
    shipments = relationship("Shipment", back_populates="customer")
    invoices = relationship("Invoice", back_populates="customer")

    def __repr__(self) -> str:
        return f"<Customer {self.name}>"
