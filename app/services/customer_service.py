"""Customer Service"""

from typing import Optional, Tuple
from uuid import UUID

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import CustomerInUseError, CustomerNotFoundError
from app.core.logging import get_logger
from app.models.billing import Invoice
from app.models.customer import Customer
from app.models.logistics import Shipment

logger = get_logger(__name__)


class CustomerService:
    @staticmethod
    async def get_customer_by_id(db: AsyncSession, customer_id: UUID) -> Optional[Customer]:
        result = await db.execute(select(Customer).where(Customer.id == customer_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def count_references(db: AsyncSession, customer_id: UUID) -> Tuple[int, int]:
        """(shipments, invoices) pointing at the customer."""
        shipments = await db.scalar(
            select(func.count()).select_from(Shipment).where(Shipment.customer_id == customer_id)
        )
        invoices = await db.scalar(
            select(func.count()).select_from(Invoice).where(Invoice.customer_id == customer_id)
        )
        return shipments or 0, invoices or 0

    @staticmethod
    async def delete_customer(db: AsyncSession, customer_id: UUID) -> None:
        """
        Delete a customer nobody references.

        Raises:
            CustomerNotFoundError: no such customer
            CustomerInUseError: shipments or invoices still reference it;
                checked before any delete is issued
        """
        customer = await CustomerService.get_customer_by_id(db, customer_id)
        if customer is None:
            raise CustomerNotFoundError(customer_id)

        shipments, invoices = await CustomerService.count_references(db, customer_id)
        if shipments or invoices:
            raise CustomerInUseError(customer_id, shipments, invoices)

        await db.execute(delete(Customer).where(Customer.id == customer_id))
        await db.commit()
        logger.info("Customer deleted", extra={"customer_id": str(customer_id)})
