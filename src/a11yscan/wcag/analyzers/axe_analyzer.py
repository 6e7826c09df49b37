# src/a11yscan/wcag/analyzers/axe_analyzer.py

import asyncio
import logging
from typing import Any, Dict, List, Optional

from playwright.async_api import (
    Error as PlaywrightError,
    Page,
    TimeoutError as PlaywrightTimeoutError,
    async_playwright
)

from ...config import ComplianceOptions, ScannerSettings
from ...errors.exceptions import RenderingUnavailableError
from ..document import RenderedDocument, SNAPSHOT_SCRIPT
from ..findings import Finding, assign_unique_ids
from ..orchestrator import AnalysisOrchestrator, axe_tags
from ..unified_result_processor import UnifiedResultProcessor
from .base_analyzer import BaseToolAnalyzer, PassResult

AXE_RUN_SCRIPT = """(tags) => axe.run(document, {
    resultTypes: ['violations'],
    runOnly: { type: 'tag', values: tags }
})"""


class AxeAnalyzer(BaseToolAnalyzer):
    """
    Gerenderter Durchlauf.
    Verwendet Playwright für Browser-Automation, prüft den Snapshot mit den
    eigenen Regeln und ergänzt die Violations von axe-core.
    """

    def __init__(self,
                 settings: Optional[ScannerSettings] = None,
                 orchestrator: Optional[AnalysisOrchestrator] = None,
                 result_processor: Optional[UnifiedResultProcessor] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialisiert den Axe Analyzer

        Args:
            settings: Laufzeit-Einstellungen (Timeouts, Browser)
            orchestrator: Führt die Regeln auf dem Snapshot aus
            result_processor: Normalisiert die axe-core Ergebnisse
            logger: Optional logger instance
        """
        super().__init__(settings, orchestrator, logger)
        self.result_processor = result_processor or UnifiedResultProcessor(logger=self.logger)

    async def analyze(self, url: str, options: ComplianceOptions) -> PassResult:
        """
        Rendert die URL und führt Regeln sowie axe-core aus

        Args:
            url: Zu testende URL
            options: Compliance-Profil

        Returns:
            PassResult mit Regel- und axe-core Findings

        Raises:
            RenderingUnavailableError: Browser nicht verfügbar oder Seite nicht renderbar
        """
        try:
            async with async_playwright() as playwright:
                try:
                    browser = await playwright.chromium.launch(
                        headless=self.settings.headless,
                        args=self.settings.browser_args
                    )
                except PlaywrightError as e:
                    raise RenderingUnavailableError(f"Could not launch browser: {str(e)}") from e

                try:
                    page = await browser.new_page(
                        viewport=self.settings.viewport,
                        user_agent=self.settings.user_agent
                    )
                    await self._navigate(page, url)

                    document = await self._snapshot(page, url)
                    findings = self.orchestrator.run(document, url, options, source="rendered")
                    findings = assign_unique_ids(findings + await self._run_axe(page, url, options))
                finally:
                    await browser.close()

        except RenderingUnavailableError:
            raise
        except PlaywrightError as e:
            raise RenderingUnavailableError(f"Rendering failed for {url}: {str(e)}") from e

        self.logger.info(f"Rendered analysis completed for {url}: found {len(findings)} issues")
        return self.create_result("success", url, findings=findings)

    async def _navigate(self, page: Page, url: str) -> None:
        try:
            await page.goto(
                url,
                wait_until="networkidle",
                timeout=self.settings.navigation_timeout_ms
            )
        except PlaywrightTimeoutError:
            # Mit dem bisher geladenen Inhalt weiterarbeiten
            self.logger.warning(
                f"Navigation to {url} timed out after {self.settings.navigation_timeout_ms}ms, "
                "continuing with partially loaded page"
            )

    async def _snapshot(self, page: Page, url: str) -> RenderedDocument:
        try:
            snapshot = await asyncio.wait_for(
                page.evaluate(SNAPSHOT_SCRIPT),
                timeout=self.settings.script_timeout_s
            )
        except asyncio.TimeoutError as e:
            raise RenderingUnavailableError(f"Snapshot script timed out for {url}") from e
        return RenderedDocument.from_snapshot(snapshot or {})

    async def _run_axe(self, page: Page, url: str, options: ComplianceOptions) -> List[Finding]:
        """
        Injiziert axe-core und normalisiert die Violations

        Args:
            page: Geladene Seite
            url: Getestete URL
            options: Compliance-Profil (bestimmt die runOnly-Tags)

        Returns:
            axe-core Findings; leer bei Timeout oder Skriptfehler
        """
        try:
            # add_script_tag wartet ohne eigenes Timeout auf das load-Event des CDN-Skripts
            await asyncio.wait_for(
                page.add_script_tag(url=self.settings.axe_script_url),
                timeout=self.settings.script_timeout_s
            )
            raw: Dict[str, Any] = await asyncio.wait_for(
                page.evaluate(AXE_RUN_SCRIPT, axe_tags(options)),
                timeout=self.settings.script_timeout_s
            )
        except asyncio.TimeoutError:
            self.logger.warning(f"axe-core timed out after {self.settings.script_timeout_s}s for {url}")
            return []
        except PlaywrightError as e:
            self.logger.warning(f"axe-core could not run on {url}: {str(e)}")
            return []

        return self.result_processor.normalize_axe_results(raw, url)
