from typing import Optional
from pydantic import BaseModel, ConfigDict
from uuid import UUID
from datetime import date
from decimal import Decimal


class RateResponse(BaseModel):
    id: UUID
    origin: str
    destination: str
    service_type: Optional[str] = None
    rate_per_kg: Decimal
    base_fee: Decimal
    min_weight: Decimal
    effective_date: Optional[date] = None

    model_config = ConfigDict(from_attributes=True)


class RateQuoteResponse(BaseModel):
    """Matched rate for a lane plus the amount it yields for `weight`."""
    rate: RateResponse
    weight: Optional[Decimal] = None
    amount: Optional[Decimal] = None
