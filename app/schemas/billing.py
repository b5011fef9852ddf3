from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID
from datetime import datetime, date
from decimal import Decimal

from app.models.enums import InvoiceStatus, GenerationStatus


class GenerateInvoiceRequest(BaseModel):
    invoice_id: UUID


class GeneratedInvoiceResponse(BaseModel):
    invoice_id: UUID
    pdf_path: str
    pdf_url: str

    model_config = ConfigDict(from_attributes=True)


class SignedUrlRequest(BaseModel):
    invoice_id: UUID


class SignedUrlResponse(BaseModel):
    signed_url: str
    expires_in: int


class CustomerBrief(BaseModel):
    id: UUID
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class InvoiceBrief(BaseModel):
    id: UUID
    invoice_ref: str
    amount: Decimal
    status: InvoiceStatus
    invoice_date: Optional[date] = None
    due_date: Optional[date] = None
    pdf_path: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class LineItemResponse(BaseModel):
    description: str
    weight: Decimal
    amount: Decimal

    model_config = ConfigDict(from_attributes=True)


class BillingSummaryResponse(BaseModel):
    invoice: InvoiceBrief
    customer: Optional[CustomerBrief] = None
    line_items: List[LineItemResponse] = []
    subtotal: Decimal
    previous_balance: Decimal
    total_outstanding: Decimal
    amount_due: Decimal

    model_config = ConfigDict(from_attributes=True)


class GenerationLogResponse(BaseModel):
    id: UUID
    invoice_id: UUID
    status: GenerationStatus
    message: Optional[str] = None
    started_at: datetime
    finished_at: Optional[datetime] = None
    duration_ms: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class AttachShipmentRequest(BaseModel):
    shipment_ref: str = Field(..., min_length=1, max_length=64)


class InvoiceItemResponse(BaseModel):
    id: UUID
    invoice_id: UUID
    shipment_id: Optional[UUID] = None
    shipment_ref: str
    amount: Decimal
    priced: bool
