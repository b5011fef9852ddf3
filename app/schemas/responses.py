"""Standardized API Response Schemas"""

from typing import Generic, TypeVar
from pydantic import BaseModel, Field


T = TypeVar('T')


class SuccessResponse(BaseModel, Generic[T]):
    """
    Standard success response envelope.
    
    Example:
        {
            "success": true,
            "data": {...},
            "message": "Invoice PDF generated"
        }
    """
    success: bool = True
    data: T
    message: str = "Operation successful"


class ErrorDetail(BaseModel):
    """Error details structure"""
    code: str
    message: str


class ErrorResponse(BaseModel):
    """
    Standard error response envelope.
    
    Example:
        {
            "success": false,
            "error": {
                "code": "RESOURCE_NOT_FOUND",
                "message": "Invoice with ID 123 not found"
            }
        }
    """
    success: bool = False
    error: ErrorDetail


class PaginationMeta(BaseModel):
    """Pagination metadata"""
    limit: int = Field(..., ge=1, le=100, description="Maximum items returned")
    offset: int = Field(..., ge=0, description="Items skipped")
    total: int = Field(..., ge=0, description="Total number of items")


class PaginatedResponse(BaseModel, Generic[T]):
    """
    Paginated response with metadata.
    
    Example:
        {
            "success": true,
            "data": [...],
            "meta": {
                "limit": 20,
                "offset": 0,
                "total": 50
            },
            "message": "Operation successful"
        }
    """
    success: bool = True
    data: list[T]
    meta: PaginationMeta
    message: str = "Operation successful"
