#!/usr/bin/env python3
"""
Send a test invoice-failure alert. Use to verify the alert webhook.

Usage:
  python scripts/send_test_alert.py
  # Requires INVOICE_ALERT_WEBHOOK_URL or SLACK_WEBHOOK_URL in .env (or export)
"""
import asyncio
import os
import sys

from dotenv import load_dotenv

# Load .env from project root
_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
load_dotenv(os.path.join(_root, ".env"))

# Add project root to path
sys.path.insert(0, _root)

from app.config import settings  # noqa: E402
from app.services.alert_service import send_invoice_failure_alert  # noqa: E402

INVOICE_ID = "00000000-0000-0000-0000-000000000000"
INVOICE_REF = "TEST-ALERT"


def main():
    if not settings.alert_webhook_url:
        print("ERROR: INVOICE_ALERT_WEBHOOK_URL or SLACK_WEBHOOK_URL must be set. Add to .env or export.")
        sys.exit(1)
    print("Sending test alert...")
    ok = asyncio.run(
        send_invoice_failure_alert(
            invoice_id=INVOICE_ID,
            invoice_ref=INVOICE_REF,
            error_message="Test alert, no invoice actually failed",
            failure_count=settings.INVOICE_FAILURE_ALERT_THRESHOLD,
        )
    )
    if ok:
        print("SUCCESS: Alert delivered. Check the channel.")
    else:
        print("FAILED: Alert was not delivered. Check logs.")
        sys.exit(1)


if __name__ == "__main__":
    main()
