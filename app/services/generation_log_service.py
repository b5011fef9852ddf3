"""Generation Log Service - audit trail of invoice PDF generation attempts"""

from datetime import datetime
from typing import Any, List, Sequence, Tuple
from uuid import UUID

from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.billing import InvoiceGenerationLog
from app.models.enums import GenerationStatus
from app.utils.time import get_utc_now, elapsed_ms


class GenerationLogService:
    @staticmethod
    async def start(db: AsyncSession, invoice_id: UUID) -> InvoiceGenerationLog:
        """Insert and commit a pending row so it survives a failing request."""
        log = InvoiceGenerationLog(
            invoice_id=invoice_id,
            status=GenerationStatus.PENDING,
            message="Generation started",
            started_at=get_utc_now(),
        )
        db.add(log)
        await db.commit()
        await db.refresh(log)
        return log

    @staticmethod
    async def _finish(
        db: AsyncSession,
        log_id: UUID,
        started_at: datetime,
        status: GenerationStatus,
        message: str,
    ) -> None:
        finished_at = get_utc_now()
        await db.execute(
            update(InvoiceGenerationLog)
            .where(InvoiceGenerationLog.id == log_id)
            .values(
                status=status,
                message=message,
                finished_at=finished_at,
                duration_ms=elapsed_ms(started_at, finished_at),
            )
        )
        await db.commit()

    @staticmethod
    async def mark_success(
        db: AsyncSession,
        log_id: UUID,
        started_at: datetime,
        message: str = "Invoice PDF generated successfully",
    ) -> None:
        await GenerationLogService._finish(db, log_id, started_at, GenerationStatus.SUCCESS, message)

    @staticmethod
    async def mark_failed(
        db: AsyncSession,
        log_id: UUID,
        started_at: datetime,
        message: str,
    ) -> None:
        """Discard the failed attempt's uncommitted writes, then record the failure."""
        await db.rollback()
        await GenerationLogService._finish(db, log_id, started_at, GenerationStatus.FAILED, message)

    @staticmethod
    async def recent_statuses(
        db: AsyncSession,
        invoice_id: UUID,
        limit: int = 3,
    ) -> List[GenerationStatus]:
        """Statuses of the newest attempts for an invoice, newest first."""
        result = await db.execute(
            select(InvoiceGenerationLog.status)
            .where(InvoiceGenerationLog.invoice_id == invoice_id)
            .order_by(InvoiceGenerationLog.started_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    @staticmethod
    def is_failure_streak(statuses: Sequence[Any], threshold: int = 3) -> bool:
        if len(statuses) < threshold:
            return False
        return all(str(getattr(s, "value", s)) == GenerationStatus.FAILED.value for s in statuses)

    @staticmethod
    async def list_logs(
        db: AsyncSession,
        invoice_id: UUID,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[InvoiceGenerationLog], int]:
        """Paginated attempts for an invoice, newest first."""
        total = await db.scalar(
            select(func.count())
            .select_from(InvoiceGenerationLog)
            .where(InvoiceGenerationLog.invoice_id == invoice_id)
        )
        result = await db.execute(
            select(InvoiceGenerationLog)
            .where(InvoiceGenerationLog.invoice_id == invoice_id)
            .order_by(InvoiceGenerationLog.started_at.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0
