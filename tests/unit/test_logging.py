"""Unit tests for the structured JSON log formatter."""

import json
import logging
from uuid import uuid4

from app.core.logging import CustomJsonFormatter


def _format(**extra) -> dict:
    record = logging.LogRecord(
        name="app.services.invoice_pdf_service",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Invoice PDF generated",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    formatter = CustomJsonFormatter(fmt="%(asctime)s %(level)s %(name)s %(message)s")
    return json.loads(formatter.format(record))


def test_invoice_context_is_emitted_as_plain_values():
    invoice_id = uuid4()

    entry = _format(
        invoice_id=invoice_id,
        invoice_ref="INV-001",
        pdf_path=f"invoices/{invoice_id}/invoice-1-0a1b2c3d.pdf",
        duration_ms=1532.7,
    )

    assert entry["message"] == "Invoice PDF generated"
    assert entry["level"] == "INFO"
    assert entry["invoice_id"] == str(invoice_id)
    assert entry["invoice_ref"] == "INV-001"
    assert entry["pdf_path"].endswith(".pdf")
    assert entry["duration_ms"] == 1532


def test_absent_context_fields_are_omitted():
    entry = _format(correlation_id=None)

    assert "invoice_id" not in entry
    assert "duration_ms" not in entry
    assert "correlation_id" not in entry
    assert entry["logger"] == "app.services.invoice_pdf_service"
