"""Invoice Service - attaching shipments and guarded invoice deletion"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import select, update, delete, func, and_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    DuplicateLineItemError,
    InvoiceLockedError,
    InvoiceNotFoundError,
    ShipmentNotFoundError,
)
from app.core.logging import get_logger
from app.models.billing import Invoice, InvoiceItem
from app.models.logistics import Shipment
from app.services import storage_service as storage
from app.services.billing_service import BillingService
from app.services.rate_service import RateService, line_amount

logger = get_logger(__name__)


@dataclass(frozen=True)
class AttachedShipment:
    item: InvoiceItem
    shipment: Shipment
    amount: Decimal
    priced: bool


class InvoiceService:
    @staticmethod
    async def get_shipment_by_ref(db: AsyncSession, shipment_ref: str) -> Optional[Shipment]:
        result = await db.execute(
            select(Shipment).where(Shipment.shipment_ref == shipment_ref)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def is_shipment_linked(db: AsyncSession, invoice_id: UUID, shipment_id: UUID) -> bool:
        existing = await db.execute(
            select(InvoiceItem.id).where(
                and_(
                    InvoiceItem.invoice_id == invoice_id,
                    InvoiceItem.shipment_id == shipment_id,
                )
            )
        )
        return existing.first() is not None

    @staticmethod
    async def count_line_items(db: AsyncSession, invoice_id: UUID) -> int:
        count = await db.scalar(
            select(func.count()).select_from(InvoiceItem).where(InvoiceItem.invoice_id == invoice_id)
        )
        return count or 0

    @staticmethod
    async def attach_shipment(
        db: AsyncSession,
        invoice_id: UUID,
        shipment_ref: str,
    ) -> AttachedShipment:
        """
        Link a shipment to an invoice, pricing it from the rate card.

        The line item insert and the invoice total increment are two separate
        commits. A lane without a rate is linked with no amount.
        """
        invoice = await BillingService.get_invoice(db, invoice_id)
        if invoice is None:
            raise InvoiceNotFoundError(invoice_id)

        ref = shipment_ref.strip()
        shipment = await InvoiceService.get_shipment_by_ref(db, ref)
        if shipment is None:
            raise ShipmentNotFoundError(ref)

        if await InvoiceService.is_shipment_linked(db, invoice.id, shipment.id):
            raise DuplicateLineItemError(ref)

        rate = await RateService.find_rate(
            db, shipment.origin, shipment.destination, shipment.service_type
        )
        amount = line_amount(rate, shipment.weight) if rate is not None else Decimal("0")

        item = InvoiceItem(
            invoice_id=invoice.id,
            shipment_id=shipment.id,
            amount=amount if amount > 0 else None,
        )
        db.add(item)
        await db.commit()

        if amount > 0:
            await db.execute(
                update(Invoice)
                .where(Invoice.id == invoice.id)
                .values(amount=Invoice.amount + amount)
            )
            await db.commit()
        else:
            logger.info(
                "No rate for shipment %s; linked without auto-pricing",
                ref,
                extra={"invoice_id": str(invoice.id)},
            )

        return AttachedShipment(item=item, shipment=shipment, amount=amount, priced=rate is not None)

    @staticmethod
    async def delete_invoice(db: AsyncSession, invoice_id: UUID) -> None:
        """Delete an invoice that has no line items yet."""
        invoice = await BillingService.get_invoice(db, invoice_id)
        if invoice is None:
            raise InvoiceNotFoundError(invoice_id)

        items = await InvoiceService.count_line_items(db, invoice.id)
        if items:
            raise InvoiceLockedError(invoice.id, items)

        pdf_path = invoice.pdf_path
        await db.execute(delete(Invoice).where(Invoice.id == invoice.id))
        await db.commit()

        if pdf_path:
            try:
                await storage.delete(pdf_path)
            except Exception as exc:
                logger.warning("Could not delete PDF %s of deleted invoice: %s", pdf_path, exc)
