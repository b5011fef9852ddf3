"""Application exceptions mapped to HTTP error envelopes by app.main"""

from fastapi import status


class AppError(Exception):
    """Base exception for billing backend errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str = "INTERNAL_ERROR",
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(self.message)


class ResourceNotFoundError(AppError):
    """A required row or stored object does not exist."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            message=f"{resource} not found: {identifier}",
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="RESOURCE_NOT_FOUND",
        )


class BusinessRuleError(AppError):
    """Operation rejected to protect billing history."""

    def __init__(self, message: str, error_code: str = "BUSINESS_RULE_VIOLATION"):
        super().__init__(
            message=message,
            status_code=status.HTTP_409_CONFLICT,
            error_code=error_code,
        )


class UpstreamServiceError(AppError):
    """Object storage or another hosted dependency returned an error."""

    def __init__(self, message: str, error_code: str = "UPSTREAM_ERROR"):
        super().__init__(
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            error_code=error_code,
        )


class InvoiceNotFoundError(ResourceNotFoundError):
    def __init__(self, invoice_id):
        super().__init__("Invoice", str(invoice_id))


class CustomerNotFoundError(ResourceNotFoundError):
    def __init__(self, customer_id):
        super().__init__("Customer", str(customer_id))


class ShipmentNotFoundError(ResourceNotFoundError):
    def __init__(self, shipment_ref: str):
        super().__init__("Shipment", shipment_ref)


class PdfNotFoundError(ResourceNotFoundError):
    def __init__(self, invoice_id):
        super().__init__("Invoice PDF", str(invoice_id))


class CustomerInUseError(BusinessRuleError):
    """Customer still referenced by shipments or invoices."""

    def __init__(self, customer_id, shipments: int, invoices: int):
        self.shipments = shipments
        self.invoices = invoices
        super().__init__(
            f"Customer {customer_id} has {shipments} shipment(s) and {invoices} invoice(s); "
            "deletion is blocked to protect historical data",
            error_code="CUSTOMER_IN_USE",
        )


class InvoiceLockedError(BusinessRuleError):
    """Invoice has line items and can no longer be deleted."""

    def __init__(self, invoice_id, items: int):
        self.items = items
        super().__init__(
            f"Invoice {invoice_id} has {items} line item(s); deletion is blocked to preserve audit history",
            error_code="INVOICE_LOCKED",
        )


class DuplicateLineItemError(BusinessRuleError):
    def __init__(self, shipment_ref: str):
        super().__init__(
            f"Shipment {shipment_ref} is already linked to this invoice",
            error_code="SHIPMENT_ALREADY_LINKED",
        )


class StorageError(UpstreamServiceError):
    def __init__(self, message: str):
        super().__init__(message, error_code="STORAGE_ERROR")
