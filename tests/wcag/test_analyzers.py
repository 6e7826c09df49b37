import asyncio
import logging
import pytest
import pytest_asyncio
from unittest.mock import AsyncMock, MagicMock, Mock, patch

from aiohttp import web
from playwright.async_api import Error as PlaywrightError, TimeoutError as PlaywrightTimeoutError

from a11yscan.config import ComplianceOptions, ScannerSettings
from a11yscan.errors import FetchError, RenderingUnavailableError
from a11yscan.wcag.analyzers import AxeAnalyzer, HTMLAnalyzer
from a11yscan.wcag.document import StaticDocument
from a11yscan.wcag.document.rendered_document import INDEX_ATTRIBUTE, SNAPSHOT_SCRIPT

from conftest import style_record

PAGE = '<!DOCTYPE html><html lang="en"><head><title>T</title></head><body><h1>T</h1><img src="a.png"></body></html>'


@pytest.fixture
def logger():
    return Mock(spec=logging.Logger)


@pytest_asyncio.fixture
async def http_server():
    """Local aiohttp server serving one page, one 404 and one slow page"""
    async def page(request):
        return web.Response(text=PAGE, content_type="text/html")

    async def missing(request):
        return web.Response(status=404, text="nope")

    async def slow(request):
        await asyncio.sleep(1)
        return web.Response(text=PAGE, content_type="text/html")

    app = web.Application()
    app.router.add_get("/page", page)
    app.router.add_get("/missing", missing)
    app.router.add_get("/slow", slow)

    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", 0)
    await site.start()
    port = runner.addresses[0][1]
    yield f"http://127.0.0.1:{port}"
    await runner.cleanup()


class TestHTMLAnalyzer:

    def test_analyze_markup(self, logger):
        analyzer = HTMLAnalyzer(logger=logger)
        result = analyzer.analyze_markup(PAGE, "https://example.com", ComplianceOptions())
        assert result.succeeded
        assert result.tool == "html"
        assert [finding.rule for finding in result.findings] == ["image-alt"]
        assert result.findings[0].source == "static"

    @pytest.mark.asyncio
    async def test_fetch_and_analyze(self, http_server, logger):
        analyzer = HTMLAnalyzer(logger=logger)
        result = await analyzer.analyze(f"{http_server}/page", ComplianceOptions())
        assert [finding.rule for finding in result.findings] == ["image-alt"]
        assert result.findings[0].source_url == f"{http_server}/page"

    @pytest.mark.asyncio
    async def test_non_2xx_raises_fetch_error(self, http_server, logger):
        analyzer = HTMLAnalyzer(logger=logger)
        with pytest.raises(FetchError) as exc_info:
            await analyzer.fetch(f"{http_server}/missing")
        assert exc_info.value.reason == "HTTP 404"

    @pytest.mark.asyncio
    async def test_timeout_raises_fetch_error(self, http_server, logger):
        analyzer = HTMLAnalyzer(ScannerSettings(fetch_timeout_s=0.1), logger=logger)
        with pytest.raises(FetchError) as exc_info:
            await analyzer.fetch(f"{http_server}/slow")
        assert "timed out" in exc_info.value.reason

    @pytest.mark.asyncio
    async def test_connection_error_raises_fetch_error(self, logger):
        analyzer = HTMLAnalyzer(ScannerSettings(fetch_timeout_s=2), logger=logger)
        with pytest.raises(FetchError):
            await analyzer.fetch("http://127.0.0.1:9/unreachable")


def playwright_context(browser=None, launch_error=None):
    """Build a mock for `async with async_playwright() as playwright`"""
    playwright = MagicMock()
    if launch_error is not None:
        playwright.chromium.launch = AsyncMock(side_effect=launch_error)
    else:
        playwright.chromium.launch = AsyncMock(return_value=browser)

    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=playwright)
    context.__aexit__ = AsyncMock(return_value=False)
    return context


def mock_browser(page):
    browser = MagicMock()
    browser.new_page = AsyncMock(return_value=page)
    browser.close = AsyncMock()
    return browser


def mock_page(snapshot, axe_result=None, goto_error=None):
    page = MagicMock()
    page.goto = AsyncMock(side_effect=goto_error)
    page.add_script_tag = AsyncMock()

    async def evaluate(script, *args):
        if script == SNAPSHOT_SCRIPT:
            return snapshot
        return axe_result or {"violations": []}

    page.evaluate = AsyncMock(side_effect=evaluate)
    return page


def rendered_snapshot():
    """Snapshot in the shape returned by the browser (index attributes + style list)"""
    static = StaticDocument(
        '<!DOCTYPE html><html lang="en"><head><title>T</title></head>'
        '<body><h1>Title</h1><p id="grey">Grey text</p></body></html>'
    )
    styles = []
    for index, node in enumerate(static.elements()):
        node.raw[INDEX_ATTRIBUTE] = str(index)
        if node.get("id") == "grey":
            styles.append(style_record(color="rgb(119, 119, 119)", font_size="14px"))
        else:
            styles.append(style_record())
    return {"html": str(static.soup), "styles": styles}


AXE_RESULT = {
    "violations": [{
        "id": "landmark-one-main",
        "impact": "moderate",
        "description": "Ensures the document has a main landmark",
        "help": "Document should have one main landmark",
        "tags": ["best-practice"],
        "nodes": [{"html": "<html>", "target": ["html"]}]
    }]
}


class TestAxeAnalyzer:

    @pytest.mark.asyncio
    async def test_rendered_pass(self, logger):
        page = mock_page(rendered_snapshot(), AXE_RESULT)
        browser = mock_browser(page)
        analyzer = AxeAnalyzer(logger=logger)

        with patch("a11yscan.wcag.analyzers.axe_analyzer.async_playwright",
                   return_value=playwright_context(browser)):
            result = await analyzer.analyze("https://example.com", ComplianceOptions())

        rules = {finding.rule: finding for finding in result.findings}
        assert rules["color-contrast"].source == "rendered"
        assert rules["landmark-one-main"].source == "axe-core"
        assert len({finding.id for finding in result.findings}) == len(result.findings)
        page.add_script_tag.assert_awaited_once_with(url=analyzer.settings.axe_script_url)
        browser.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_axe_tags_follow_profile(self, logger):
        page = mock_page(rendered_snapshot())
        analyzer = AxeAnalyzer(logger=logger)

        with patch("a11yscan.wcag.analyzers.axe_analyzer.async_playwright",
                   return_value=playwright_context(mock_browser(page))):
            await analyzer.analyze("https://example.com", ComplianceOptions(wcag_level="a", best_practices=False))

        axe_call = page.evaluate.await_args_list[-1]
        assert axe_call.args[1] == ["wcag2a", "wcag21a"]

    @pytest.mark.asyncio
    async def test_launch_failure(self, logger):
        analyzer = AxeAnalyzer(logger=logger)
        with patch("a11yscan.wcag.analyzers.axe_analyzer.async_playwright",
                   return_value=playwright_context(launch_error=PlaywrightError("Executable doesn't exist"))):
            with pytest.raises(RenderingUnavailableError):
                await analyzer.analyze("https://example.com", ComplianceOptions())

    @pytest.mark.asyncio
    async def test_navigation_timeout_continues(self, logger):
        page = mock_page(rendered_snapshot(), goto_error=PlaywrightTimeoutError("Timeout 30000ms exceeded"))
        browser = mock_browser(page)
        analyzer = AxeAnalyzer(logger=logger)

        with patch("a11yscan.wcag.analyzers.axe_analyzer.async_playwright",
                   return_value=playwright_context(browser)):
            result = await analyzer.analyze("https://example.com", ComplianceOptions())

        assert "color-contrast" in {finding.rule for finding in result.findings}
        logger.warning.assert_called()
        browser.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_navigation_error_closes_browser(self, logger):
        page = mock_page(rendered_snapshot(), goto_error=PlaywrightError("net::ERR_NAME_NOT_RESOLVED"))
        browser = mock_browser(page)
        analyzer = AxeAnalyzer(logger=logger)

        with patch("a11yscan.wcag.analyzers.axe_analyzer.async_playwright",
                   return_value=playwright_context(browser)):
            with pytest.raises(RenderingUnavailableError):
                await analyzer.analyze("https://example.com", ComplianceOptions())

        browser.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_axe_timeout_drops_axe_findings(self, logger):
        page = mock_page(rendered_snapshot())

        async def evaluate(script, *args):
            if script == SNAPSHOT_SCRIPT:
                return rendered_snapshot()
            await asyncio.sleep(1)

        page.evaluate = AsyncMock(side_effect=evaluate)
        analyzer = AxeAnalyzer(ScannerSettings(script_timeout_s=0.05), logger=logger)

        with patch("a11yscan.wcag.analyzers.axe_analyzer.async_playwright",
                   return_value=playwright_context(mock_browser(page))):
            result = await analyzer.analyze("https://example.com", ComplianceOptions())

        assert result.findings
        assert all(finding.source == "rendered" for finding in result.findings)

    @pytest.mark.asyncio
    async def test_stalled_axe_script_load_is_bounded(self, logger):
        page = mock_page(rendered_snapshot(), AXE_RESULT)

        async def never_loads(**kwargs):
            await asyncio.Event().wait()

        page.add_script_tag = AsyncMock(side_effect=never_loads)
        browser = mock_browser(page)
        analyzer = AxeAnalyzer(ScannerSettings(script_timeout_s=0.05), logger=logger)

        with patch("a11yscan.wcag.analyzers.axe_analyzer.async_playwright",
                   return_value=playwright_context(browser)):
            result = await asyncio.wait_for(
                analyzer.analyze("https://example.com", ComplianceOptions()), timeout=5
            )

        assert "color-contrast" in {finding.rule for finding in result.findings}
        assert all(finding.source == "rendered" for finding in result.findings)
        browser.close.assert_awaited_once()
