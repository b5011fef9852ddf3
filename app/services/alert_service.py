"""Outbound alerts to a Slack-compatible incoming webhook.

Set INVOICE_ALERT_WEBHOOK_URL (or SLACK_WEBHOOK_URL). Without either, alerts
are skipped with a warning.
"""

import logging
from typing import Optional

import httpx

from app.config import settings

logger = logging.getLogger(__name__)


def build_invoice_failure_text(
    invoice_id: str,
    invoice_ref: Optional[str],
    error_message: str,
    failure_count: int,
) -> str:
    lines = [
        "Invoice PDF generation has repeatedly failed.",
        f"Invoice ID: {invoice_id}",
        f"Invoice Ref: {invoice_ref}" if invoice_ref else None,
        f"Failure count (recent attempts): {failure_count}",
        f"Last error: {error_message}",
    ]
    return "\n".join(line for line in lines if line)


async def send_invoice_failure_alert(
    invoice_id: str,
    invoice_ref: Optional[str],
    error_message: str,
    failure_count: int,
) -> bool:
    """
    POST {"text": ...} to the alert webhook.
    Returns True if delivered, False if skipped (no webhook) or failed.
    Never raises.
    """
    webhook_url = settings.alert_webhook_url
    if not webhook_url:
        logger.warning(
            "Alert webhook not configured. Set INVOICE_ALERT_WEBHOOK_URL or SLACK_WEBHOOK_URL "
            "to enable alerts (invoice %s failed %s times)",
            invoice_id,
            failure_count,
        )
        return False

    payload = {
        "text": build_invoice_failure_text(invoice_id, invoice_ref, error_message, failure_count)
    }

    try:
        async with httpx.AsyncClient(timeout=settings.ALERT_TIMEOUT_SECONDS) as client:
            response = await client.post(webhook_url, json=payload)
        if response.is_error:
            logger.error("Failed to send invoice failure alert. Status: %s", response.status_code)
            return False
        logger.info("Invoice failure alert sent for %s", invoice_id)
        return True
    except httpx.HTTPError as e:
        logger.exception("Error while sending invoice failure alert for %s: %s", invoice_id, e)
        return False
