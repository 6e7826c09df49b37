# src/a11yscan/wcag/wcag_integration_manager.py

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Protocol, Tuple

from ..config import ComplianceOptions, ScannerSettings
from ..errors.exceptions import FetchError, InvalidBatchError, RenderingUnavailableError
from ..logging_config import get_logger
from ..utils import _split_urls
from .analyzers import AxeAnalyzer, BaseToolAnalyzer, HTMLAnalyzer
from .detectors import registered_detectors
from .findings import Finding, ScanResult, SeveritySummary
from .orchestrator import AnalysisOrchestrator
from .query_engine import QueryEngine
from .result_store import ResultStore
from .unified_result_processor import UnifiedResultProcessor


class EvidenceCapturer(Protocol):
    """Externer Dienst, der ein Beweisbild für ein Element erstellt"""

    async def capture(self, url: str, locator_or_snippet: str) -> Optional[str]:
        ...


@dataclass
class BatchSubmission:
    """Rückmeldung einer Batch-Einreichung"""
    success: bool
    count: int
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"success": self.success, "count": self.count}
        if self.errors:
            result["errors"] = list(self.errors)
        return result


class WCAGIntegrationManager:
    """
    Zentrale Integrationsklasse für WCAG-Analysen.
    Koordiniert statischen und gerenderten Durchlauf je URL, führt die
    Ergebnisse zusammen und ersetzt den ResultStore pro Batch.
    """

    def __init__(self,
                 settings: Optional[ScannerSettings] = None,
                 static_analyzer: Optional[BaseToolAnalyzer] = None,
                 rendered_analyzer: Optional[BaseToolAnalyzer] = None,
                 result_processor: Optional[UnifiedResultProcessor] = None,
                 evidence_capturer: Optional[EvidenceCapturer] = None,
                 store: Optional[ResultStore] = None,
                 render: bool = True,
                 logger: Optional[logging.Logger] = None):
        """
        Initialisiert den WCAG Integration Manager

        Args:
            settings: Laufzeit-Einstellungen
            static_analyzer: Statischer Durchlauf (Standard: HTMLAnalyzer)
            rendered_analyzer: Gerenderter Durchlauf (Standard: AxeAnalyzer)
            result_processor: Reconciler für beide Durchläufe
            evidence_capturer: Optionaler Dienst für Beweisbilder
            store: Ziel-Store; standardmäßig ein neuer, leerer Store
            render: False deaktiviert den gerenderten Durchlauf
            logger: Optional logger instance
        """
        self.settings = settings or ScannerSettings()
        self.logger = logger or get_logger('WCAGIntegration', log_dir=self.settings.log_dir)

        orchestrator = AnalysisOrchestrator(logger=self.logger)
        self.result_processor = result_processor or UnifiedResultProcessor(logger=self.logger)
        self.static_analyzer = static_analyzer or HTMLAnalyzer(self.settings, orchestrator, self.logger)
        if rendered_analyzer is None and render:
            rendered_analyzer = AxeAnalyzer(self.settings, orchestrator, self.result_processor, self.logger)
        self.rendered_analyzer = rendered_analyzer if render else None
        self.evidence_capturer = evidence_capturer

        self.store = store if store is not None else ResultStore()
        self.query_engine = QueryEngine(self.store)

        self.logger.info("WCAG Integration Manager initialized")

    async def submit(self,
                     urls: Iterable[str],
                     options: Optional[ComplianceOptions] = None) -> BatchSubmission:
        """
        Analysiert einen Batch von URLs und ersetzt den Store-Inhalt

        Args:
            urls: Eingereichte URLs; ungültige werden vorab verworfen
            options: Compliance-Profil (Standard: ComplianceOptions())

        Returns:
            BatchSubmission mit Anzahl analysierter URLs und Fehlerliste

        Raises:
            InvalidBatchError: Wenn keine gültige URL übrig bleibt
        """
        options = options or ComplianceOptions()
        valid_urls, rejected = _split_urls(urls)
        if rejected:
            self.logger.warning(f"Skipping {len(rejected)} invalid URL(s): {rejected}")
        if not valid_urls:
            raise InvalidBatchError("No valid URLs provided")

        self.logger.info(f"Starting batch of {len(valid_urls)} URL(s) at WCAG level {options.wcag_level.upper()}")

        semaphore = asyncio.Semaphore(max(1, self.settings.max_concurrency))
        outcomes = await asyncio.gather(*(
            self._analyze_with_limit(semaphore, url, options) for url in valid_urls
        ))

        results = [result for result, _ in outcomes]
        errors = [error for _, error in outcomes if error]
        self.store.replace(results)

        summary = SeveritySummary.from_findings(
            (finding for result in results for finding in result.findings),
            urls_analyzed=len(results)
        )
        self.logger.info(
            f"Batch completed: {summary.total} findings across {len(results)} URL(s), {len(errors)} error(s)"
        )
        return BatchSubmission(success=True, count=len(valid_urls), errors=errors)

    async def _analyze_with_limit(self,
                                  semaphore: asyncio.Semaphore,
                                  url: str,
                                  options: ComplianceOptions) -> Tuple[ScanResult, Optional[str]]:
        async with semaphore:
            return await self.analyze_url(url, options)

    async def analyze_url(self,
                          url: str,
                          options: ComplianceOptions) -> Tuple[ScanResult, Optional[str]]:
        """
        Führt eine vollständige Analyse für eine URL durch

        Args:
            url: Zu analysierende URL
            options: Compliance-Profil

        Returns:
            (ScanResult, Fehlermeldung oder None)
        """
        self.logger.info(f"Starting analysis for URL: {url}")

        try:
            static = await self.static_analyzer.analyze(url, options)
        except FetchError as e:
            error_msg = f"Failed to analyze {url}: {e.reason}"
            self.logger.error(error_msg)
            return ScanResult(url=url, error=error_msg), error_msg
        except Exception as e:
            error_msg = f"Failed to analyze {url}: {str(e)}"
            self.logger.error(error_msg, exc_info=True)
            return ScanResult(url=url, error=error_msg), error_msg

        rendered_findings: List[Finding] = []
        superseded_rules: List[str] = []
        reduced_confidence = self.rendered_analyzer is None
        if self.rendered_analyzer is not None:
            try:
                rendered = await self.rendered_analyzer.analyze(url, options)
                rendered_findings = rendered.findings
                superseded_rules = [spec.name for spec in registered_detectors() if spec.render_sensitive]
            except RenderingUnavailableError as e:
                reduced_confidence = True
                self.logger.warning(f"Rendered pass unavailable for {url}, using static results only: {str(e)}")
            except Exception as e:
                reduced_confidence = True
                self.logger.warning(f"Rendered pass failed for {url}, using static results only: {str(e)}", exc_info=True)

        result = self.result_processor.build_scan_result(
            url,
            static.findings,
            rendered_findings,
            reduced_confidence=reduced_confidence,
            superseded_rules=superseded_rules
        )

        if options.capture_screenshots and self.evidence_capturer is not None:
            result = await self.attach_evidence(result)

        self.logger.info(f"Analysis for {url} finished with {result.summary.total} findings")
        return result, None

    async def attach_evidence(self, result: ScanResult) -> ScanResult:
        """
        Ergänzt Findings um Beweisbilder des EvidenceCapturer

        Args:
            result: ScanResult einer URL

        Returns:
            ScanResult mit angereicherten Findings; Fehler bleiben folgenlos
        """
        enriched = []
        for finding in result.findings:
            target = finding.element_locator or finding.element_snippet
            try:
                path = await self.evidence_capturer.capture(result.url, target)
            except Exception as e:
                self.logger.warning(f"Evidence capture failed for {finding.id}: {str(e)}")
                path = None
            enriched.append(finding.with_evidence(path) if path else finding)
        return result.with_findings(enriched)

    def export_payload(self) -> Dict[str, Any]:
        """
        Liefert alle Ergebnisse im Exportformat

        Returns:
            {"results": [...], "summary": {...}, "scans": [...]}
        """
        results = self.store.snapshot()
        findings = [finding for result in results for finding in result.findings]
        return {
            "results": [finding.to_dict() for finding in findings],
            "summary": SeveritySummary.from_findings(findings, urls_analyzed=len(results)).to_dict(),
            "scans": [
                {
                    "url": result.url,
                    "summary": result.summary.to_dict(),
                    "error": result.error,
                    "reduced_confidence": result.reduced_confidence
                }
                for result in results
            ]
        }
