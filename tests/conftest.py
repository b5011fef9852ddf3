"""Shared pytest fixtures for unit and API tests."""

import uuid
from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from dotenv import load_dotenv
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

# Load .env before app.config builds the settings instance
load_dotenv()

from app.main import app  # noqa: E402
from app.config import settings  # noqa: E402
from app.api import deps  # noqa: E402
from app.core.rate_limit import limiter  # noqa: E402
from app.models.enums import InvoiceStatus  # noqa: E402
from app.services.render_host import BrowserManager  # noqa: E402


@pytest.fixture
def api_base() -> str:
    """Base URL for API requests."""
    return f"http://test{settings.API_V1_PREFIX}"


@pytest.fixture
def db_session():
    """Mocked AsyncSession; services under test are patched per test."""
    return AsyncMock(spec=AsyncSession)


@pytest.fixture
def browser_manager():
    """Render host stand-in that returns a tiny PDF without launching Chromium."""
    manager = AsyncMock(spec=BrowserManager)
    manager.render_pdf.return_value = b"%PDF-1.4 test"
    return manager


@pytest.fixture
async def async_client(api_base: str, db_session, browser_manager):
    """API client with the database session and render host overridden."""

    async def _get_db():
        yield db_session

    app.dependency_overrides[deps.get_db] = _get_db
    app.dependency_overrides[deps.get_browser_manager] = lambda: browser_manager
    limiter.reset()
    transport = ASGITransport(app=app)
    client = AsyncClient(transport=transport, base_url=api_base, timeout=30.0)
    yield client
    await client.aclose()
    app.dependency_overrides.clear()
    limiter.reset()


@pytest.fixture
def make_invoice():
    """Factory for invoice-shaped rows."""

    def _make(
        amount="5000",
        status=InvoiceStatus.PENDING,
        invoice_date=date(2026, 3, 10),
        invoice_ref="INV-001",
        customer_id=None,
        pdf_path=None,
        invoice_id=None,
    ):
        return SimpleNamespace(
            id=invoice_id or uuid.uuid4(),
            invoice_ref=invoice_ref,
            amount=Decimal(str(amount)),
            status=status,
            invoice_date=invoice_date,
            due_date=None,
            customer_id=customer_id,
            pdf_path=pdf_path,
        )

    return _make
