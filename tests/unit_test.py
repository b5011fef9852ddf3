"""Unit tests that do not require a running API or external services."""
from app.config import settings


def test_settings_load():
    """Settings load from environment (e.g. CI env vars)."""
    assert settings.API_V1_PREFIX == "/api/v1"
    assert settings.APP_NAME == "Tapan Cargo Billing"
    assert settings.STORAGE_BUCKET_NAME == "invoices"


def test_environment_flag():
    """Environment flags reflect ENVIRONMENT value."""
    # In CI we set ENVIRONMENT=test
    assert settings.ENVIRONMENT.lower() in ("development", "test", "production")
    assert settings.is_development == (settings.ENVIRONMENT.lower() == "development")
    assert settings.is_production == (settings.ENVIRONMENT.lower() == "production")


def test_list_settings_are_split():
    assert isinstance(settings.BROWSER_LAUNCH_ARGS, list)
    assert all(arg.startswith("--") for arg in settings.BROWSER_LAUNCH_ARGS)
    assert isinstance(settings.COMPANY_ADDRESS_LINES, list)
    assert settings.COMPANY_ADDRESS_LINES
