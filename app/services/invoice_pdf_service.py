"""Invoice PDF Service - generate, store and serve invoice documents"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import InvoiceNotFoundError, PdfNotFoundError
from app.core.logging import get_logger
from app.models.billing import Invoice
from app.services import alert_service
from app.services import storage_service as storage
from app.services.billing_service import BillingService
from app.services.generation_log_service import GenerationLogService
from app.services.invoice_document import render_invoice_html
from app.services.render_host import BrowserManager
from app.utils.time import elapsed_ms, get_utc_now

logger = get_logger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(frozen=True)
class GeneratedInvoicePdf:
    invoice_id: UUID
    pdf_path: str
    pdf_url: str


@dataclass(frozen=True)
class InvoicePdfFile:
    filename: str
    path: str
    content: bytes


def download_filename(invoice: Invoice) -> str:
    label = _UNSAFE_FILENAME_CHARS.sub("-", str(invoice.invoice_ref or invoice.id)).strip("-")
    return f"Invoice-{label or invoice.id}.pdf"


class InvoicePdfService:
    @staticmethod
    async def _store_pdf_path(db: AsyncSession, invoice_id: UUID, pdf_path: str) -> None:
        await db.execute(
            update(Invoice).where(Invoice.id == invoice_id).values(pdf_path=pdf_path)
        )
        await db.commit()

        stored = await db.scalar(select(Invoice.pdf_path).where(Invoice.id == invoice_id))
        if stored != pdf_path:
            logger.warning(
                "Invoice pdf_path re-read does not match the uploaded artifact",
                extra={"invoice_id": str(invoice_id), "expected": pdf_path, "stored": stored},
            )

    @staticmethod
    async def _delete_previous(previous_path: str, invoice_id: UUID) -> None:
        try:
            await storage.delete(previous_path)
        except Exception as exc:
            logger.warning(
                "Could not delete previous invoice PDF %s: %s",
                previous_path,
                exc,
                extra={"invoice_id": str(invoice_id)},
            )

    @staticmethod
    async def _report_failure(
        db: AsyncSession,
        invoice_id: UUID,
        invoice_ref: Optional[str],
        log_id: UUID,
        started_at: datetime,
        message: str,
    ) -> None:
        """Record the failed attempt and alert on a streak. Never raises."""
        try:
            await GenerationLogService.mark_failed(db, log_id, started_at, message)
        except Exception:
            logger.exception("Failed to record invoice generation failure for %s", invoice_id)

        threshold = settings.INVOICE_FAILURE_ALERT_THRESHOLD
        try:
            statuses = await GenerationLogService.recent_statuses(db, invoice_id, limit=threshold)
            if GenerationLogService.is_failure_streak(statuses, threshold):
                await alert_service.send_invoice_failure_alert(
                    invoice_id=str(invoice_id),
                    invoice_ref=invoice_ref,
                    error_message=message,
                    failure_count=len(statuses),
                )
        except Exception:
            logger.exception("Failed to process failure alert for invoice %s", invoice_id)

    @staticmethod
    async def generate(
        db: AsyncSession,
        invoice_id: UUID,
        browser: BrowserManager,
    ) -> GeneratedInvoicePdf:
        """
        Render the invoice to PDF, store it under a fresh path and return a
        signed download URL.

        Every attempt is recorded in the generation log. On failure the
        attempt is marked failed, a streak of failures triggers an alert, and
        the original exception is re-raised.
        """
        summary = await BillingService.aggregate(db, invoice_id)
        invoice = summary.invoice
        invoice_key = invoice.id
        invoice_ref = invoice.invoice_ref
        previous_path = invoice.pdf_path

        html = render_invoice_html(summary)

        log = await GenerationLogService.start(db, invoice_key)
        log_id, started_at = log.id, log.started_at

        try:
            pdf_bytes = await browser.render_pdf(html)

            pdf_path = storage.build_invoice_pdf_path(invoice_key)
            await storage.upload(pdf_path, pdf_bytes, storage.PDF_CONTENT_TYPE)
            await InvoicePdfService._store_pdf_path(db, invoice_key, pdf_path)

            if previous_path and previous_path != pdf_path:
                await InvoicePdfService._delete_previous(previous_path, invoice_key)

            pdf_url = await storage.create_signed_url(
                pdf_path, settings.INVOICE_SIGNED_URL_TTL_SECONDS
            )
            await GenerationLogService.mark_success(db, log_id, started_at)
        except Exception as exc:
            message = str(exc) or "Invoice PDF generation failed"
            logger.error(
                "Invoice PDF generation failed: %s",
                message,
                extra={
                    "invoice_id": str(invoice_key),
                    "invoice_ref": invoice_ref,
                    "duration_ms": elapsed_ms(started_at, get_utc_now()),
                },
                exc_info=True,
            )
            await InvoicePdfService._report_failure(
                db, invoice_key, invoice_ref, log_id, started_at, message
            )
            raise

        logger.info(
            "Invoice PDF generated",
            extra={
                "invoice_id": str(invoice_key),
                "invoice_ref": invoice_ref,
                "pdf_path": pdf_path,
                "size": len(pdf_bytes),
                "duration_ms": elapsed_ms(started_at, get_utc_now()),
            },
        )
        return GeneratedInvoicePdf(invoice_id=invoice_key, pdf_path=pdf_path, pdf_url=pdf_url)

    @staticmethod
    async def _get_invoice(db: AsyncSession, invoice_id: UUID) -> Invoice:
        invoice = await BillingService.get_invoice(db, invoice_id)
        if invoice is None:
            raise InvoiceNotFoundError(invoice_id)
        return invoice

    @staticmethod
    async def download(
        db: AsyncSession,
        invoice_id: UUID,
        path: Optional[str] = None,
    ) -> InvoicePdfFile:
        """
        Fetch the stored PDF bytes for an invoice. An explicit path must be
        one of this invoice's own artifacts.
        """
        invoice = await InvoicePdfService._get_invoice(db, invoice_id)
        pdf_path = path or invoice.pdf_path
        if not pdf_path:
            raise PdfNotFoundError(invoice_id)
        if path and not storage.is_invoice_pdf_path(invoice.id, path):
            raise PdfNotFoundError(invoice_id)

        content = await storage.download(pdf_path)
        return InvoicePdfFile(filename=download_filename(invoice), path=pdf_path, content=content)

    @staticmethod
    async def signed_url(db: AsyncSession, invoice_id: UUID) -> str:
        """Fresh signed URL for the invoice's current PDF."""
        invoice = await InvoicePdfService._get_invoice(db, invoice_id)
        if not invoice.pdf_path:
            raise PdfNotFoundError(invoice_id)
        return await storage.create_signed_url(
            invoice.pdf_path, settings.INVOICE_SIGNED_URL_TTL_SECONDS
        )
