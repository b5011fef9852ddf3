"""Rate Service - lane pricing for shipments attached to invoices"""

from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional, Sequence

from sqlalchemy import func, select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enums import ServiceType
from app.models.logistics import Rate
from app.utils.money import to_decimal

DEFAULT_SERVICE_TYPE = ServiceType.STANDARD.value


def _normalize_service(service_type: Optional[str]) -> str:
    return (service_type or DEFAULT_SERVICE_TYPE).strip().lower()


def select_rate(
    candidates: Sequence[Any],
    service_type: Optional[str],
    on_date: date,
) -> Optional[Any]:
    """
    Pick one rate for a lane.

    Only rates for the requested service (or for any service, i.e. null) that
    are already effective on `on_date` qualify. Ties break on: exact service
    match, then latest effective date, then most recently created.
    """
    wanted = _normalize_service(service_type)
    eligible = [
        rate
        for rate in candidates
        if (rate.service_type is None or rate.service_type.strip().lower() == wanted)
        and (rate.effective_date is None or rate.effective_date <= on_date)
    ]
    if not eligible:
        return None
    return max(
        eligible,
        key=lambda rate: (
            rate.service_type is not None,
            rate.effective_date or date.min,
            rate.created_at or datetime.min,
        ),
    )


def line_amount(rate: Any, weight: Any) -> Decimal:
    """base_fee + max(weight, min_weight) * rate_per_kg, to the paisa."""
    billable_weight = max(to_decimal(weight), to_decimal(rate.min_weight))
    amount = to_decimal(rate.base_fee) + billable_weight * to_decimal(rate.rate_per_kg)
    return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class RateService:
    @staticmethod
    async def list_lane_rates(
        db: AsyncSession,
        origin: str,
        destination: str,
        service_type: Optional[str],
    ) -> list:
        result = await db.execute(
            select(Rate).where(
                Rate.origin == origin,
                Rate.destination == destination,
                or_(
                    func.lower(Rate.service_type) == _normalize_service(service_type),
                    Rate.service_type.is_(None),
                ),
            )
        )
        return list(result.scalars().all())

    @staticmethod
    async def find_rate(
        db: AsyncSession,
        origin: Optional[str],
        destination: Optional[str],
        service_type: Optional[str] = None,
        on_date: Optional[date] = None,
    ) -> Optional[Rate]:
        """Effective rate for a lane, or None when the lane is not priced."""
        if not origin or not destination:
            return None
        candidates = await RateService.list_lane_rates(db, origin, destination, service_type)
        return select_rate(candidates, service_type, on_date or date.today())

    line_amount = staticmethod(line_amount)
