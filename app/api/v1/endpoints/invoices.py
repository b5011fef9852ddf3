from typing import Any, Optional
from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.api import deps
from app.config import settings
from app.core.exceptions import AppError, InvoiceNotFoundError
from app.core.rate_limit import invoice_rate_limit, limiter
from app.services.billing_service import BillingService
from app.services.generation_log_service import GenerationLogService
from app.services.invoice_pdf_service import InvoicePdfService
from app.services.invoice_service import InvoiceService
from app.services.render_host import BrowserManager
from app.schemas.billing import (
    AttachShipmentRequest,
    BillingSummaryResponse,
    GenerateInvoiceRequest,
    GeneratedInvoiceResponse,
    GenerationLogResponse,
    InvoiceItemResponse,
    SignedUrlRequest,
    SignedUrlResponse,
)
from app.schemas.responses import SuccessResponse, PaginatedResponse

router = APIRouter()


@router.post("/generate", response_model=SuccessResponse[GeneratedInvoiceResponse])
@limiter.limit(invoice_rate_limit)
async def generate_invoice_pdf(
    request: Request,
    body: GenerateInvoiceRequest,
    db: AsyncSession = Depends(deps.get_db),
    browser: BrowserManager = Depends(deps.get_browser_manager),
) -> Any:
    """
    Render the invoice to PDF, store it and return a signed download URL.
    """
    try:
        generated = await InvoicePdfService.generate(db, body.invoice_id, browser)
    except AppError:
        raise
    except Exception as exc:
        raise AppError(
            f"Failed to generate invoice PDF: {exc}",
            error_code="INVOICE_GENERATION_FAILED",
        ) from exc

    return SuccessResponse(
        data=GeneratedInvoiceResponse.model_validate(generated),
        message="Invoice PDF generated",
    )


@router.get("/download")
@limiter.limit(invoice_rate_limit)
async def download_invoice_pdf(
    request: Request,
    invoice_id: UUID,
    path: Optional[str] = None,
    db: AsyncSession = Depends(deps.get_db),
) -> Response:
    """
    Stream the stored PDF as an attachment.
    """
    pdf = await InvoicePdfService.download(db, invoice_id, path)
    return Response(
        content=pdf.content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{pdf.filename}"'},
    )


@router.post("/signed-url", response_model=SuccessResponse[SignedUrlResponse])
async def create_invoice_signed_url(
    body: SignedUrlRequest,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Fresh time-limited URL for the invoice's current PDF.
    """
    url = await InvoicePdfService.signed_url(db, body.invoice_id)
    return SuccessResponse(
        data=SignedUrlResponse(
            signed_url=url,
            expires_in=settings.INVOICE_SIGNED_URL_TTL_SECONDS,
        )
    )


@router.get("/{invoice_id}/summary", response_model=SuccessResponse[BillingSummaryResponse])
async def get_invoice_summary(
    invoice_id: UUID,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Line items and balances exactly as they appear on the invoice document.
    """
    summary = await BillingService.aggregate(db, invoice_id)
    return SuccessResponse(data=BillingSummaryResponse.model_validate(summary))


@router.get("/{invoice_id}/logs", response_model=PaginatedResponse[GenerationLogResponse])
async def list_generation_logs(
    invoice_id: UUID,
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    PDF generation attempts for an invoice, newest first.
    """
    invoice = await BillingService.get_invoice(db, invoice_id)
    if invoice is None:
        raise InvoiceNotFoundError(invoice_id)

    logs, total = await GenerationLogService.list_logs(db, invoice_id, limit=limit, offset=offset)
    return PaginatedResponse(
        data=[GenerationLogResponse.model_validate(log) for log in logs],
        meta={"limit": limit, "offset": offset, "total": total},
    )


@router.post("/{invoice_id}/shipments", response_model=SuccessResponse[InvoiceItemResponse], status_code=201)
async def attach_shipment(
    invoice_id: UUID,
    body: AttachShipmentRequest,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Link a shipment to the invoice and add its rated amount to the total.
    """
    attached = await InvoiceService.attach_shipment(db, invoice_id, body.shipment_ref)
    message = "Shipment linked" if attached.priced else "Shipment linked without a matching rate"
    return SuccessResponse(
        data=InvoiceItemResponse(
            id=attached.item.id,
            invoice_id=attached.item.invoice_id,
            shipment_id=attached.item.shipment_id,
            shipment_ref=attached.shipment.shipment_ref,
            amount=attached.amount,
            priced=attached.priced,
        ),
        message=message,
    )


@router.delete("/{invoice_id}", response_model=SuccessResponse[dict])
async def delete_invoice(
    invoice_id: UUID,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Delete an invoice. Invoices with line items are kept for audit.
    """
    await InvoiceService.delete_invoice(db, invoice_id)
    return SuccessResponse(data={"id": str(invoice_id)}, message="Invoice deleted")
