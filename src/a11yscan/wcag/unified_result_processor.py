# src/a11yscan/wcag/unified_result_processor.py

import logging
from typing import Any, Dict, Iterable, List, Optional

from ..logging_config import get_logger
from .findings import Finding, ScanResult, assign_unique_ids

AXE_SOURCE = "axe-core"


class UnifiedResultProcessor:
    """
    Führt die Findings der Analyse-Durchläufe zu einem kanonischen Satz zusammen.
    Der gerenderte Durchlauf ist maßgeblich: bei gleicher ID gewinnt sein Finding.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialisiert den UnifiedResultProcessor

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or get_logger(self.__class__.__name__)

    def reconcile(self,
                  static: Iterable[Finding],
                  rendered: Iterable[Finding],
                  superseded_rules: Iterable[str] = ()) -> List[Finding]:
        """
        Vereinigt statische und gerenderte Findings über ihre ID

        Args:
            static: Findings des statischen Durchlaufs
            rendered: Findings des gerenderten Durchlaufs (inkl. axe-core)
            superseded_rules: Regeln, deren statische Findings der gerenderte
                Durchlauf vollständig ersetzt

        Returns:
            Zusammengeführte Findings in Reihenfolge des ersten Auftretens
        """
        superseded = set(superseded_rules)
        merged: Dict[str, Finding] = {}
        for finding in static:
            if finding.rule in superseded:
                continue
            merged[finding.id] = finding
        overwritten = 0
        for finding in rendered:
            if finding.id in merged:
                overwritten += 1
            # dict behält die Position des ersten Schlüssels bei
            merged[finding.id] = finding

        self.logger.debug(f"Reconciled {len(merged)} findings ({overwritten} replaced by rendered pass)")
        return list(merged.values())

    def build_scan_result(self,
                          url: str,
                          static: Iterable[Finding],
                          rendered: Iterable[Finding] = (),
                          reduced_confidence: bool = False,
                          superseded_rules: Iterable[str] = ()) -> ScanResult:
        """
        Erstellt das ScanResult einer URL aus beiden Durchläufen

        Args:
            url: Analysierte URL
            static: Findings des statischen Durchlaufs
            rendered: Findings des gerenderten Durchlaufs
            reduced_confidence: True, wenn der gerenderte Durchlauf fehlte
            superseded_rules: Siehe reconcile

        Returns:
            ScanResult; die Zusammenfassung wird aus den Findings berechnet
        """
        findings = self.reconcile(static, rendered, superseded_rules)
        return ScanResult(url=url, findings=tuple(findings), reduced_confidence=reduced_confidence)

    def normalize_axe_results(self, raw: Optional[Dict[str, Any]], url: str) -> List[Finding]:
        """
        Überführt axe-core Violations in Findings

        Args:
            raw: Ergebnis von axe.run()
            url: Getestete URL

        Returns:
            Ein Finding pro betroffenem Knoten
        """
        findings = []
        for violation in (raw or {}).get("violations", []) or []:
            rule = violation.get("id") or "unknown"
            message = violation.get("description") or violation.get("help") or rule
            remediation = violation.get("help") or ""
            tags = violation.get("tags") or []

            for node in violation.get("nodes", []) or []:
                locator = _target_selector(node.get("target"))
                details = {"help_url": violation.get("helpUrl")}
                if node.get("failureSummary"):
                    details["failure_summary"] = node["failureSummary"]

                findings.append(Finding.create(
                    rule=rule,
                    url=url,
                    message=message,
                    remediation=remediation,
                    snippet=node.get("html"),
                    impact=node.get("impact") or violation.get("impact"),
                    tags=tags,
                    locator=locator,
                    auxiliary_data=details,
                    source=AXE_SOURCE
                ))

        self.logger.debug(f"Normalized {len(findings)} axe-core findings for {url}")
        return assign_unique_ids(findings)


def _target_selector(target: Any) -> Optional[str]:
    """axe-core targets sind Listen; verschachtelte Listen stehen für iframes/Shadow DOM"""
    if not target:
        return None
    if isinstance(target, str):
        return target
    parts = []
    for part in target:
        if isinstance(part, (list, tuple)):
            parts.append(" ".join(str(p) for p in part))
        else:
            parts.append(str(part))
    return " ".join(parts)
