from typing import Any, Optional
from decimal import Decimal
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api import deps
from app.core.exceptions import ResourceNotFoundError
from app.services.rate_service import RateService, line_amount
from app.schemas.rate import RateQuoteResponse, RateResponse
from app.schemas.responses import SuccessResponse

router = APIRouter()


@router.get("/lookup", response_model=SuccessResponse[RateQuoteResponse])
async def lookup_rate(
    origin: str = Query(..., min_length=1),
    destination: str = Query(..., min_length=1),
    service_type: Optional[str] = None,
    weight: Optional[Decimal] = Query(None, ge=0),
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Effective rate for a lane, with the quoted amount when a weight is given.
    """
    rate = await RateService.find_rate(db, origin, destination, service_type)
    if rate is None:
        raise ResourceNotFoundError("Rate", f"{origin} -> {destination}")

    return SuccessResponse(
        data=RateQuoteResponse(
            rate=RateResponse.model_validate(rate),
            weight=weight,
            amount=line_amount(rate, weight) if weight is not None else None,
        )
    )
