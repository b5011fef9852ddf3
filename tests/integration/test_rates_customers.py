"""Integration tests: rate lookup and customer deletion endpoints."""

import pytest
from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch
from uuid import uuid4

from app.core.exceptions import CustomerInUseError


def _rate():
    return SimpleNamespace(
        id=uuid4(),
        origin="Delhi",
        destination="Imphal",
        service_type="standard",
        rate_per_kg=Decimal("40"),
        base_fee=Decimal("100"),
        min_weight=Decimal("5"),
        effective_date=date(2026, 1, 1),
    )


@pytest.mark.asyncio
async def test_rate_lookup_quotes_amount(async_client, api_base):
    with patch("app.api.v1.endpoints.rates.RateService.find_rate", new_callable=AsyncMock) as mock_find:
        mock_find.return_value = _rate()
        resp = await async_client.get(
            f"{api_base}/rates/lookup",
            params={"origin": "Delhi", "destination": "Imphal", "weight": "12"},
        )

    assert resp.status_code == 200, resp.text
    data = resp.json()["data"]
    assert data["rate"]["service_type"] == "standard"
    assert Decimal(data["amount"]) == Decimal("580.00")


@pytest.mark.asyncio
async def test_rate_lookup_unpriced_lane_is_404(async_client, api_base):
    with patch("app.api.v1.endpoints.rates.RateService.find_rate", new_callable=AsyncMock) as mock_find:
        mock_find.return_value = None
        resp = await async_client.get(
            f"{api_base}/rates/lookup", params={"origin": "Delhi", "destination": "Nowhere"}
        )

    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_delete_customer_in_use_is_409(async_client, api_base):
    customer_id = uuid4()

    with patch("app.api.v1.endpoints.customers.CustomerService.delete_customer", new_callable=AsyncMock) as mock_delete:
        mock_delete.side_effect = CustomerInUseError(customer_id, 3, 1)
        resp = await async_client.delete(f"{api_base}/customers/{customer_id}")

    assert resp.status_code == 409
    error = resp.json()["error"]
    assert error["code"] == "CUSTOMER_IN_USE"
    assert "3 shipment(s)" in error["message"]


@pytest.mark.asyncio
async def test_delete_customer(async_client, api_base):
    customer_id = uuid4()

    with patch("app.api.v1.endpoints.customers.CustomerService.delete_customer", new_callable=AsyncMock):
        resp = await async_client.delete(f"{api_base}/customers/{customer_id}")

    assert resp.status_code == 200
    assert resp.json()["data"]["id"] == str(customer_id)
