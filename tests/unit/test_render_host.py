"""Unit tests for the shared headless browser (Playwright is mocked)."""

import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from app.services.render_host import BrowserManager, PDF_OPTIONS


def _fake_browser(pdf=b"%PDF-1.4"):
    page = AsyncMock()
    page.pdf.return_value = pdf
    browser = MagicMock()
    browser.is_connected.return_value = True
    browser.new_page = AsyncMock(return_value=page)
    browser.close = AsyncMock()
    return browser, page


def _fake_playwright(*browsers):
    playwright = MagicMock()
    playwright.chromium.launch = AsyncMock(side_effect=list(browsers))
    playwright.stop = AsyncMock()
    starter = MagicMock()
    starter.start = AsyncMock(return_value=playwright)
    return starter, playwright


@pytest.mark.asyncio
async def test_browser_is_launched_once_and_reused():
    browser, _ = _fake_browser()
    starter, playwright = _fake_playwright(browser)
    manager = BrowserManager(launch_args=["--no-sandbox"], capture_screenshots=False)

    with patch("app.services.render_host.async_playwright", return_value=starter):
        first, second = await asyncio.gather(manager.get_browser(), manager.get_browser())
        third = await manager.get_browser()

    assert first is second is third is browser
    playwright.chromium.launch.assert_awaited_once_with(headless=True, args=["--no-sandbox"])
    browser.on.assert_called_once()
    assert browser.on.call_args[0][0] == "disconnected"


@pytest.mark.asyncio
async def test_browser_is_relaunched_after_disconnect():
    old, _ = _fake_browser()
    new, _ = _fake_browser()
    starter, playwright = _fake_playwright(old, new)
    manager = BrowserManager(launch_args=[], capture_screenshots=False)

    with patch("app.services.render_host.async_playwright", return_value=starter):
        assert await manager.get_browser() is old

        on_disconnected = old.on.call_args[0][1]
        on_disconnected(old)
        assert not manager.is_running

        assert await manager.get_browser() is new

    assert playwright.chromium.launch.await_count == 2
    # driver is started once and reused
    starter.start.assert_awaited_once()


@pytest.mark.asyncio
async def test_dead_browser_without_event_is_replaced():
    old, _ = _fake_browser()
    new, _ = _fake_browser()
    starter, _ = _fake_playwright(old, new)
    manager = BrowserManager(launch_args=[], capture_screenshots=False)

    with patch("app.services.render_host.async_playwright", return_value=starter):
        await manager.get_browser()
        old.is_connected.return_value = False
        assert await manager.get_browser() is new


@pytest.mark.asyncio
async def test_render_pdf_prints_a4_and_closes_page():
    browser, page = _fake_browser(pdf=b"%PDF-bytes")
    starter, _ = _fake_playwright(browser)
    manager = BrowserManager(launch_args=[], capture_screenshots=False)

    with patch("app.services.render_host.async_playwright", return_value=starter):
        pdf = await manager.render_pdf("<html></html>")

    assert pdf == b"%PDF-bytes"
    page.set_content.assert_awaited_once_with("<html></html>", wait_until="networkidle")
    page.pdf.assert_awaited_once_with(**PDF_OPTIONS)
    assert PDF_OPTIONS["format"] == "A4"
    assert PDF_OPTIONS["print_background"] is True
    page.close.assert_awaited_once()
    page.screenshot.assert_not_awaited()


@pytest.mark.asyncio
async def test_page_is_closed_when_printing_fails():
    browser, page = _fake_browser()
    page.pdf.side_effect = RuntimeError("Target closed")
    starter, _ = _fake_playwright(browser)
    manager = BrowserManager(launch_args=[], capture_screenshots=False)

    with patch("app.services.render_host.async_playwright", return_value=starter):
        with pytest.raises(RuntimeError):
            await manager.render_pdf("<html></html>")

    page.close.assert_awaited_once()
    browser.close.assert_not_awaited()


@pytest.mark.asyncio
async def test_screenshot_failure_does_not_fail_render(tmp_path):
    browser, page = _fake_browser()
    page.screenshot.side_effect = OSError("read-only file system")
    starter, _ = _fake_playwright(browser)
    manager = BrowserManager(
        launch_args=[], capture_screenshots=True, screenshot_path=str(tmp_path / "debug.png")
    )

    with patch("app.services.render_host.async_playwright", return_value=starter):
        pdf = await manager.render_pdf("<html></html>")

    assert pdf == b"%PDF-1.4"
    page.screenshot.assert_awaited_once()


@pytest.mark.asyncio
async def test_close_shuts_down_browser_and_driver():
    browser, _ = _fake_browser()
    starter, playwright = _fake_playwright(browser)
    manager = BrowserManager(launch_args=[], capture_screenshots=False)

    with patch("app.services.render_host.async_playwright", return_value=starter):
        await manager.get_browser()
        await manager.close()

    browser.close.assert_awaited_once()
    playwright.stop.assert_awaited_once()
    assert not manager.is_running
