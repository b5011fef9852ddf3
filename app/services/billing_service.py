"""Billing Service - balances and line items for a single invoice"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import InvoiceNotFoundError
from app.core.logging import get_logger
from app.models.billing import Invoice, InvoiceItem
from app.models.customer import Customer
from app.models.enums import InvoiceStatus
from app.utils.money import to_decimal

logger = get_logger(__name__)

UNPAID_STATUSES = frozenset({InvoiceStatus.PENDING.value, InvoiceStatus.OVERDUE.value})
GENERIC_LINE_DESCRIPTION = "Logistics services"
ZERO = Decimal("0")


@dataclass(frozen=True)
class LineItem:
    description: str
    weight: Decimal
    amount: Decimal


@dataclass
class BillingSummary:
    """Everything the invoice document needs about money."""

    invoice: Invoice
    customer: Optional[Customer]
    line_items: List[LineItem] = field(default_factory=list)
    subtotal: Decimal = ZERO
    previous_balance: Decimal = ZERO
    total_outstanding: Decimal = ZERO
    amount_due: Decimal = ZERO


def status_value(status: Any) -> str:
    """Lower-cased status text for enum members and raw strings alike."""
    return str(getattr(status, "value", status) or "").lower()


def is_unpaid(status: Any) -> bool:
    return status_value(status) in UNPAID_STATUSES


def compute_balances(
    invoice_id: UUID,
    invoice_amount: Decimal,
    invoice_date: Optional[date],
    customer_invoices: Sequence[Any],
) -> Tuple[Decimal, Decimal, Decimal]:
    """
    Return (previous_balance, total_outstanding, amount_due).

    customer_invoices holds every invoice of the customer, the current one
    included; rows need `id`, `amount`, `status` and `invoice_date`.
    Undated invoices fall back to total minus the current amount, which
    double counts when the customer has several undated unpaid invoices.
    """
    unpaid = [row for row in customer_invoices if is_unpaid(row.status)]
    total_outstanding = sum((to_decimal(row.amount) for row in unpaid), ZERO)

    if invoice_date is not None:
        previous_balance = sum(
            (
                to_decimal(row.amount)
                for row in unpaid
                if row.id != invoice_id
                and row.invoice_date is not None
                and row.invoice_date < invoice_date
            ),
            ZERO,
        )
    else:
        previous_balance = max(ZERO, total_outstanding - invoice_amount)

    amount_due = total_outstanding if total_outstanding > 0 else invoice_amount
    return previous_balance, total_outstanding, amount_due


def describe_shipment(shipment: Any, index: int) -> str:
    """'AWB123 | Delhi → Imphal', or 'Shipment N' when nothing is known."""
    parts = []
    if shipment is not None:
        if shipment.shipment_ref:
            parts.append(str(shipment.shipment_ref))
        route = [p for p in (shipment.origin, shipment.destination) if p]
        if route:
            parts.append(" → ".join(route))
    return " | ".join(parts) or f"Shipment {index + 1}"


def build_line_items(
    items: Sequence[InvoiceItem],
    invoice_amount: Decimal,
) -> Tuple[List[LineItem], Decimal]:
    """
    Resolve invoice items to printable lines and their subtotal.

    When nothing carries a charge but the invoice has an amount, the lines
    collapse into one generic line for the full amount so the document is
    never empty.
    """
    lines = [
        LineItem(
            description=describe_shipment(item.shipment, index),
            weight=to_decimal(item.shipment.weight if item.shipment is not None else None),
            amount=to_decimal(item.amount),
        )
        for index, item in enumerate(items)
    ]
    subtotal = sum((line.amount for line in lines), ZERO)

    if subtotal == 0 and invoice_amount > 0:
        refs = [
            str(item.shipment.shipment_ref)
            for item in items
            if item.shipment is not None and item.shipment.shipment_ref
        ]
        description = GENERIC_LINE_DESCRIPTION
        if refs:
            description = f"{description} ({', '.join(refs)})"
        lines = [
            LineItem(
                description=description,
                weight=sum((line.weight for line in lines), ZERO),
                amount=invoice_amount,
            )
        ]
        subtotal = invoice_amount

    return lines, subtotal


class BillingService:
    @staticmethod
    async def get_invoice(db: AsyncSession, invoice_id: UUID) -> Optional[Invoice]:
        result = await db.execute(select(Invoice).where(Invoice.id == invoice_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_customer(db: AsyncSession, customer_id: UUID) -> Optional[Customer]:
        result = await db.execute(select(Customer).where(Customer.id == customer_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def list_customer_invoices(db: AsyncSession, customer_id: UUID) -> List[Invoice]:
        result = await db.execute(
            select(Invoice).where(Invoice.customer_id == customer_id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def list_invoice_items(db: AsyncSession, invoice_id: UUID) -> List[InvoiceItem]:
        result = await db.execute(
            select(InvoiceItem)
            .where(InvoiceItem.invoice_id == invoice_id)
            .options(selectinload(InvoiceItem.shipment))
            .order_by(InvoiceItem.created_at)
        )
        return list(result.scalars().all())

    @staticmethod
    async def aggregate(db: AsyncSession, invoice_id: UUID) -> BillingSummary:
        """
        Compute previous balance, amount due and line items for an invoice.

        Raises:
            InvoiceNotFoundError: the invoice does not exist. Every other
                missing lookup degrades to an empty/zero value.
        """
        invoice = await BillingService.get_invoice(db, invoice_id)
        if invoice is None:
            raise InvoiceNotFoundError(invoice_id)

        customer = None
        customer_invoices: List[Invoice] = [invoice]
        if invoice.customer_id is not None:
            customer = await BillingService.get_customer(db, invoice.customer_id)
            customer_invoices = await BillingService.list_customer_invoices(db, invoice.customer_id)
            if not any(row.id == invoice.id for row in customer_invoices):
                customer_invoices.append(invoice)

        items = await BillingService.list_invoice_items(db, invoice.id)

        invoice_amount = to_decimal(invoice.amount)
        previous_balance, total_outstanding, amount_due = compute_balances(
            invoice.id, invoice_amount, invoice.invoice_date, customer_invoices
        )
        line_items, subtotal = build_line_items(items, invoice_amount)

        logger.info(
            "Billing summary computed",
            extra={
                "invoice_id": str(invoice.id),
                "line_items": len(line_items),
                "previous_balance": str(previous_balance),
                "amount_due": str(amount_due),
            },
        )
        return BillingSummary(
            invoice=invoice,
            customer=customer,
            line_items=line_items,
            subtotal=subtotal,
            previous_balance=previous_balance,
            total_outstanding=total_outstanding,
            amount_due=amount_due,
        )
