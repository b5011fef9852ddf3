"""Unit tests for the failure alert webhook."""

import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from app.services import alert_service


def test_failure_text():
    text = alert_service.build_invoice_failure_text("abc", "INV-001", "Target closed", 3)

    assert "Invoice ID: abc" in text
    assert "Invoice Ref: INV-001" in text
    assert "Failure count (recent attempts): 3" in text
    assert "Last error: Target closed" in text


def test_failure_text_without_ref():
    text = alert_service.build_invoice_failure_text("abc", None, "boom", 3)
    assert "Invoice Ref" not in text


@pytest.mark.asyncio
async def test_alert_skipped_without_webhook():
    with patch.object(alert_service.settings, "INVOICE_ALERT_WEBHOOK_URL", ""), \
         patch.object(alert_service.settings, "SLACK_WEBHOOK_URL", ""), \
         patch("app.services.alert_service.httpx.AsyncClient") as mock_client:
        sent = await alert_service.send_invoice_failure_alert("abc", "INV-001", "boom", 3)

    assert sent is False
    mock_client.assert_not_called()


def _client_returning(response=None, error=None):
    client = MagicMock()
    client.post = AsyncMock(return_value=response, side_effect=error)
    client.__aenter__ = AsyncMock(return_value=client)
    client.__aexit__ = AsyncMock(return_value=False)
    return client


@pytest.mark.asyncio
async def test_alert_posts_text_payload():
    response = MagicMock(is_error=False, status_code=200)
    client = _client_returning(response)

    with patch.object(alert_service.settings, "INVOICE_ALERT_WEBHOOK_URL", "https://hooks.example/x"), \
         patch("app.services.alert_service.httpx.AsyncClient", return_value=client):
        sent = await alert_service.send_invoice_failure_alert("abc", "INV-001", "boom", 3)

    assert sent is True
    url = client.post.call_args.args[0]
    payload = client.post.call_args.kwargs["json"]
    assert url == "https://hooks.example/x"
    assert "Last error: boom" in payload["text"]


@pytest.mark.asyncio
async def test_alert_falls_back_to_slack_webhook():
    response = MagicMock(is_error=False, status_code=200)
    client = _client_returning(response)

    with patch.object(alert_service.settings, "INVOICE_ALERT_WEBHOOK_URL", ""), \
         patch.object(alert_service.settings, "SLACK_WEBHOOK_URL", "https://hooks.slack.example/y"), \
         patch("app.services.alert_service.httpx.AsyncClient", return_value=client):
        sent = await alert_service.send_invoice_failure_alert("abc", None, "boom", 3)

    assert sent is True
    assert client.post.call_args.args[0] == "https://hooks.slack.example/y"


@pytest.mark.asyncio
async def test_alert_error_response_returns_false():
    response = MagicMock(is_error=True, status_code=500)
    client = _client_returning(response)

    with patch.object(alert_service.settings, "INVOICE_ALERT_WEBHOOK_URL", "https://hooks.example/x"), \
         patch("app.services.alert_service.httpx.AsyncClient", return_value=client):
        sent = await alert_service.send_invoice_failure_alert("abc", "INV-001", "boom", 3)

    assert sent is False


@pytest.mark.asyncio
async def test_alert_transport_error_is_swallowed():
    client = _client_returning(error=httpx.ConnectError("refused"))

    with patch.object(alert_service.settings, "INVOICE_ALERT_WEBHOOK_URL", "https://hooks.example/x"), \
         patch("app.services.alert_service.httpx.AsyncClient", return_value=client):
        sent = await alert_service.send_invoice_failure_alert("abc", "INV-001", "boom", 3)

    assert sent is False
