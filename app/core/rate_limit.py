"""Per-client rate limiting for the expensive invoice routes."""

from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)


def invoice_rate_limit() -> str:
    """Read on every request so the limit follows the current settings."""
    return f"{settings.RATE_LIMIT_PER_MINUTE}/minute"
