# src/a11yscan/wcag/orchestrator.py

import logging
from typing import Iterable, List, Optional

from ..config import ComplianceOptions
from ..logging_config import get_logger
from .detectors import DetectorGroup, DetectorSpec, registered_detectors
from .document import DocumentModel, StyleComputingDocument
from .findings import Finding, assign_unique_ids

ALWAYS_ENABLED_GROUPS = (DetectorGroup.CORE, DetectorGroup.DOCUMENT)


class AnalysisOrchestrator:
    """
    Wählt anhand des Compliance-Profils die Regeln aus und führt sie
    isoliert auf einem Dokument aus.
    """

    def __init__(self,
                 detectors: Optional[Iterable[DetectorSpec]] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialisiert den Orchestrator

        Args:
            detectors: Regeln; standardmäßig alle registrierten
            logger: Optional logger instance
        """
        self.detectors = list(detectors) if detectors is not None else registered_detectors()
        self.logger = logger or get_logger(self.__class__.__name__)

    @staticmethod
    def enabled_groups(options: ComplianceOptions) -> List[DetectorGroup]:
        groups = list(ALWAYS_ENABLED_GROUPS)
        if options.wcag_level in ("aa", "aaa"):
            groups.append(DetectorGroup.WCAG_AA)
        if options.wcag_level == "aaa":
            groups.append(DetectorGroup.WCAG_AAA)
        if options.section508:
            groups.append(DetectorGroup.SECTION_508)
        return groups

    def select(self, options: ComplianceOptions, document: DocumentModel) -> List[DetectorSpec]:
        """
        Bestimmt die auszuführenden Regeln

        Args:
            options: Compliance-Profil
            document: Zu prüfendes Dokument

        Returns:
            Regeln in Registrierungsreihenfolge
        """
        groups = self.enabled_groups(options)
        styled = isinstance(document, StyleComputingDocument)
        return [
            spec for spec in self.detectors
            if spec.group in groups and (styled or not spec.requires_style)
        ]

    def run(self,
            document: DocumentModel,
            url: str,
            options: ComplianceOptions,
            source: str = "static") -> List[Finding]:
        """
        Führt alle ausgewählten Regeln aus

        Args:
            document: Zu prüfendes Dokument
            url: URL, der die Findings zugeordnet werden
            options: Compliance-Profil
            source: Herkunft der Findings ("static" oder "rendered")

        Returns:
            Findings mit innerhalb des Durchlaufs eindeutigen IDs
        """
        findings: List[Finding] = []
        for spec in self.select(options, document):
            try:
                produced = spec(document, url)
            except Exception as e:
                self.logger.error(f"Detector {spec.name} failed for {url}: {str(e)}", exc_info=True)
                continue
            findings.extend(finding.with_source(source) for finding in produced)

        self.logger.debug(f"{source} pass produced {len(findings)} findings for {url}")
        return assign_unique_ids(findings)


def axe_tags(options: ComplianceOptions) -> List[str]:
    """
    Leitet die runOnly-Tags für axe-core aus dem Profil ab

    Args:
        options: Compliance-Profil

    Returns:
        Tag-Liste, z.B. ["wcag2a", "wcag21a", "wcag2aa", "wcag21aa", "best-practice"]
    """
    tags = ["wcag2a", "wcag21a"]
    if options.wcag_level in ("aa", "aaa"):
        tags.extend(["wcag2aa", "wcag21aa", "wcag22aa"])
    if options.wcag_level == "aaa":
        tags.append("wcag2aaa")
    if options.section508:
        tags.append("section508")
    if options.best_practices:
        tags.append("best-practice")
    if options.experimental:
        tags.append("experimental")
    return tags
