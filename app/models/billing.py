"""Billing Models: invoices, their line items and PDF generation audit log"""

from sqlalchemy import Column, String, Date, DateTime, Integer, Numeric, Text, ForeignKey
from sqlalchemy.dialects.postgresql import UUID, ENUM
from sqlalchemy.orm import relationship

from app.models.base import BaseModel
from app.models.enums import InvoiceStatus, GenerationStatus
from app.utils.time import get_utc_now


class Invoice(BaseModel):
    """
    Customer invoice. `amount` grows as shipments are attached; `pdf_path`
    is only written by the PDF pipeline.
    """
    __tablename__ = "invoices"

    invoice_ref = Column(String(64), unique=True, nullable=False, index=True)
    customer_id = Column(
        UUID(as_uuid=True),
        ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    amount = Column(Numeric(12, 2), nullable=False, default=0)
    status = Column(
        ENUM(InvoiceStatus, name="invoice_status", values_callable=lambda x: [e.value for e in x]),
        default=InvoiceStatus.PENDING,
        nullable=False,
        index=True,
    )
    invoice_date = Column(Date, nullable=True)
    due_date = Column(Date, nullable=True)
    pdf_path = Column(String(500), nullable=True)

    # Relationships
    customer = relationship("Customer", back_populates="invoices")
    items = relationship("InvoiceItem", back_populates="invoice")
    generation_logs = relationship("InvoiceGenerationLog", back_populates="invoice")

    def __repr__(self) -> str:
        return f"<Invoice {self.invoice_ref} {self.amount} - {self.status}>"


class InvoiceItem(BaseModel):
    """One shipment's charge on an invoice. Immutable once created."""
    __tablename__ = "invoice_items"

    invoice_id = Column(
        UUID(as_uuid=True),
        ForeignKey("invoices.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    shipment_id = Column(
        UUID(as_uuid=True),
        ForeignKey("shipments.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    amount = Column(Numeric(12, 2), nullable=True)

    invoice = relationship("Invoice", back_populates="items")
    shipment = relationship("Shipment")

    def __repr__(self) -> str:
        return f"<InvoiceItem {self.invoice_id} {self.amount}>"


class InvoiceGenerationLog(BaseModel):
    """Append-only record of one PDF generation attempt."""
    __tablename__ = "invoice_generation_logs"

    invoice_id = Column(
        UUID(as_uuid=True),
        ForeignKey("invoices.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status = Column(
        ENUM(GenerationStatus, name="generation_status", values_callable=lambda x: [e.value for e in x]),
        default=GenerationStatus.PENDING,
        nullable=False,
    )
    message = Column(Text, nullable=True)
    started_at = Column(DateTime, default=get_utc_now, nullable=False, index=True)
    finished_at = Column(DateTime, nullable=True)
    duration_ms = Column(Integer, nullable=True)

    invoice = relationship("Invoice", back_populates="generation_logs")

    def __repr__(self) -> str:
        return f"<InvoiceGenerationLog {self.invoice_id} {self.status}>"
