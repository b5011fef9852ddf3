"""Models Package - Export all models for easy imports"""

from app.models.base import BaseModel
from app.models.enums import *
from app.models.customer import Customer
from app.models.logistics import Shipment, Rate
from app.models.billing import Invoice, InvoiceItem, InvoiceGenerationLog


__all__ = [
    # Base classes
    "BaseModel",

    # Customers
    "Customer",

    # Logistics
    "Shipment",
    "Rate",

    # Billing
    "Invoice",
    "InvoiceItem",
    "InvoiceGenerationLog",
]
