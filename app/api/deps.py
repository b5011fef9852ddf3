"""API Dependencies"""

from fastapi import Request

from app.database import get_db
from app.services.render_host import BrowserManager

__all__ = ["get_db", "get_browser_manager"]


def get_browser_manager(request: Request) -> BrowserManager:
    """
    Shared headless browser owned by the application lifespan.

    Args:
        request: Incoming request

    Returns:
        The process-wide BrowserManager
    """
    return request.app.state.browser_manager
