"""Unit tests for InvoiceService: attaching shipments and guarded deletion."""

import pytest
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch
from uuid import uuid4
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import (
    DuplicateLineItemError,
    InvoiceLockedError,
    InvoiceNotFoundError,
    ShipmentNotFoundError,
)
from app.models.billing import InvoiceItem
from app.services.invoice_service import InvoiceService

SERVICE = "app.services.invoice_service"


def _shipment():
    return SimpleNamespace(
        id=uuid4(),
        shipment_ref="AWB100",
        origin="Delhi",
        destination="Imphal",
        weight=Decimal("12"),
        service_type="standard",
    )


def _rate():
    return SimpleNamespace(rate_per_kg=Decimal("40"), base_fee=Decimal("100"), min_weight=Decimal("5"))


@pytest.mark.asyncio
async def test_attach_priced_shipment(make_invoice):
    db = AsyncMock(spec=AsyncSession)
    invoice = make_invoice(amount="0")
    shipment = _shipment()

    with patch(f"{SERVICE}.BillingService.get_invoice", new_callable=AsyncMock) as mock_invoice, \
         patch(f"{SERVICE}.InvoiceService.get_shipment_by_ref", new_callable=AsyncMock) as mock_shipment, \
         patch(f"{SERVICE}.InvoiceService.is_shipment_linked", new_callable=AsyncMock) as mock_linked, \
         patch(f"{SERVICE}.RateService.find_rate", new_callable=AsyncMock) as mock_rate:
        mock_invoice.return_value = invoice
        mock_shipment.return_value = shipment
        mock_linked.return_value = False
        mock_rate.return_value = _rate()

        attached = await InvoiceService.attach_shipment(db, invoice.id, " AWB100 ")

    mock_shipment.assert_awaited_once_with(db, "AWB100")
    assert attached.priced is True
    assert attached.amount == Decimal("580.00")
    item = db.add.call_args.args[0]
    assert isinstance(item, InvoiceItem)
    assert item.shipment_id == shipment.id
    assert item.amount == Decimal("580.00")
    # line item insert and invoice total increment commit separately
    assert db.commit.await_count == 2
    db.execute.assert_awaited_once()


@pytest.mark.asyncio
async def test_attach_without_rate_links_unpriced(make_invoice):
    db = AsyncMock(spec=AsyncSession)
    invoice = make_invoice(amount="0")

    with patch(f"{SERVICE}.BillingService.get_invoice", new_callable=AsyncMock) as mock_invoice, \
         patch(f"{SERVICE}.InvoiceService.get_shipment_by_ref", new_callable=AsyncMock) as mock_shipment, \
         patch(f"{SERVICE}.InvoiceService.is_shipment_linked", new_callable=AsyncMock) as mock_linked, \
         patch(f"{SERVICE}.RateService.find_rate", new_callable=AsyncMock) as mock_rate:
        mock_invoice.return_value = invoice
        mock_shipment.return_value = _shipment()
        mock_linked.return_value = False
        mock_rate.return_value = None

        attached = await InvoiceService.attach_shipment(db, invoice.id, "AWB100")

    assert attached.priced is False
    assert attached.amount == Decimal("0")
    assert db.add.call_args.args[0].amount is None
    assert db.commit.await_count == 1
    db.execute.assert_not_awaited()


@pytest.mark.asyncio
async def test_attach_unknown_shipment(make_invoice):
    db = AsyncMock(spec=AsyncSession)

    with patch(f"{SERVICE}.BillingService.get_invoice", new_callable=AsyncMock) as mock_invoice, \
         patch(f"{SERVICE}.InvoiceService.get_shipment_by_ref", new_callable=AsyncMock) as mock_shipment:
        mock_invoice.return_value = make_invoice()
        mock_shipment.return_value = None
        with pytest.raises(ShipmentNotFoundError):
            await InvoiceService.attach_shipment(db, uuid4(), "AWB404")

    db.add.assert_not_called()


@pytest.mark.asyncio
async def test_attach_same_shipment_twice(make_invoice):
    db = AsyncMock(spec=AsyncSession)

    with patch(f"{SERVICE}.BillingService.get_invoice", new_callable=AsyncMock) as mock_invoice, \
         patch(f"{SERVICE}.InvoiceService.get_shipment_by_ref", new_callable=AsyncMock) as mock_shipment, \
         patch(f"{SERVICE}.InvoiceService.is_shipment_linked", new_callable=AsyncMock) as mock_linked:
        mock_invoice.return_value = make_invoice()
        mock_shipment.return_value = _shipment()
        mock_linked.return_value = True
        with pytest.raises(DuplicateLineItemError):
            await InvoiceService.attach_shipment(db, uuid4(), "AWB100")

    db.add.assert_not_called()
    db.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_attach_to_missing_invoice():
    db = AsyncMock(spec=AsyncSession)

    with patch(f"{SERVICE}.BillingService.get_invoice", new_callable=AsyncMock) as mock_invoice:
        mock_invoice.return_value = None
        with pytest.raises(InvoiceNotFoundError):
            await InvoiceService.attach_shipment(db, uuid4(), "AWB100")


@pytest.mark.asyncio
async def test_invoice_with_items_cannot_be_deleted(make_invoice):
    db = AsyncMock(spec=AsyncSession)

    with patch(f"{SERVICE}.BillingService.get_invoice", new_callable=AsyncMock) as mock_invoice, \
         patch(f"{SERVICE}.InvoiceService.count_line_items", new_callable=AsyncMock) as mock_count:
        mock_invoice.return_value = make_invoice()
        mock_count.return_value = 2
        with pytest.raises(InvoiceLockedError) as exc_info:
            await InvoiceService.delete_invoice(db, uuid4())

    assert exc_info.value.items == 2
    db.execute.assert_not_awaited()


@pytest.mark.asyncio
async def test_empty_invoice_is_deleted_with_its_pdf(make_invoice):
    db = AsyncMock(spec=AsyncSession)
    invoice = make_invoice(pdf_path="invoices/x/invoice-1.pdf")

    with patch(f"{SERVICE}.BillingService.get_invoice", new_callable=AsyncMock) as mock_invoice, \
         patch(f"{SERVICE}.InvoiceService.count_line_items", new_callable=AsyncMock) as mock_count, \
         patch("app.services.storage_service.delete", new_callable=AsyncMock) as mock_delete:
        mock_invoice.return_value = invoice
        mock_count.return_value = 0

        await InvoiceService.delete_invoice(db, invoice.id)

    db.execute.assert_awaited_once()
    db.commit.assert_awaited_once()
    mock_delete.assert_awaited_once_with("invoices/x/invoice-1.pdf")
