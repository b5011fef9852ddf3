"""Centralized Enum Definitions"""

import enum


# Billing
class InvoiceStatus(str, enum.Enum):
    """Invoice payment status"""
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"
    PARTIALLY_PAID = "partially_paid"


class GenerationStatus(str, enum.Enum):
    """Outcome of one invoice PDF generation attempt"""
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


# Logistics
class ServiceType(str, enum.Enum):
    """Shipment service levels priced by the rate card"""
    STANDARD = "standard"
    EXPRESS = "express"
    AIR = "air"
    SURFACE = "surface"
