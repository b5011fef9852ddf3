from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from app.api import deps
from app.services.customer_service import CustomerService
from app.schemas.responses import SuccessResponse

router = APIRouter()


@router.delete("/{customer_id}", response_model=SuccessResponse[dict])
async def delete_customer(
    customer_id: UUID,
    db: AsyncSession = Depends(deps.get_db),
) -> Any:
    """
    Delete a customer. Blocked while shipments or invoices reference it.
    """
    await CustomerService.delete_customer(db, customer_id)
    return SuccessResponse(data={"id": str(customer_id)}, message="Customer deleted")
