# src/a11yscan/wcag/query_engine.py

import json
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .findings import (
    Finding,
    Impact,
    SeveritySummary,
    SEVERITY_RANK,
    UNKNOWN_SEVERITY_RANK
)
from .result_store import ResultStore

SORT_KEYS = ("severity", "url", "date")


@dataclass(frozen=True)
class QueryPage:
    """Eine Ergebnisseite inklusive Gesamtanzahl und Zusammenfassung der Treffermenge"""
    items: Tuple[Finding, ...]
    total_count: int
    summary: SeveritySummary
    page: int = 1
    page_size: int = 10

    @property
    def total_pages(self) -> int:
        if self.total_count == 0:
            return 0
        return math.ceil(self.total_count / self.page_size)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "results": [finding.to_dict() for finding in self.items],
            "total": self.total_count,
            "page": self.page,
            "page_size": self.page_size,
            "total_pages": self.total_pages,
            "summary": self.summary.to_dict()
        }


def _severity_rank(finding: Finding) -> int:
    return SEVERITY_RANK.get(finding.severity.value, UNKNOWN_SEVERITY_RANK)


def _searchable_fields(finding: Finding) -> Iterable[str]:
    yield finding.source_url
    yield finding.message
    yield finding.remediation
    yield finding.element_snippet
    if finding.element_locator:
        yield finding.element_locator
    if finding.auxiliary_data:
        yield json.dumps(finding.auxiliary_data, default=str, ensure_ascii=False)


def _normalize_severities(severities: Optional[Iterable[Any]]) -> Optional[set]:
    if not severities:
        return None
    values = set()
    for severity in severities:
        if isinstance(severity, Impact):
            values.add(severity.value)
        else:
            values.add(str(severity).strip().lower())
    return values


class QueryEngine:
    """
    Filtert, sortiert und paginiert die Findings eines ResultStore.
    Abfragen sind reine Lesezugriffe auf einen Snapshot.
    """

    def __init__(self, store: ResultStore):
        self.store = store

    def all_findings(self) -> List[Finding]:
        return list(self.store.findings())

    def find_by_id(self, finding_id: str) -> Optional[Finding]:
        for finding in self.store.findings():
            if finding.id == finding_id:
                return finding
        return None

    def query(self,
              page: int = 1,
              page_size: int = 10,
              sort_by: str = "severity",
              search_text: Optional[str] = None,
              severity_filter: Optional[Sequence[Any]] = None,
              compliance_filter: Optional[Sequence[str]] = None) -> QueryPage:
        """
        Liefert eine Seite gefilterter und sortierter Findings

        Args:
            page: Seitennummer ab 1; kleinere Werte gelten als 1
            page_size: Einträge pro Seite, mindestens 1
            sort_by: "severity", "url" oder "date"; andere Werte behalten die Reihenfolge
            search_text: Teilstring-Suche ohne Beachtung der Groß-/Kleinschreibung
            severity_filter: Erlaubte Schweregrade; leer = keine Einschränkung
            compliance_filter: Mindestens einer dieser Tags muss vorhanden sein

        Returns:
            QueryPage mit Gesamtanzahl und Zusammenfassung der gefilterten Menge

        Raises:
            ValueError: Bei page_size < 1
        """
        if page_size < 1:
            raise ValueError(f"page_size must be at least 1, got {page_size}")
        page = max(page, 1)

        results = self.store.snapshot()
        findings = [finding for result in results for finding in result.findings]

        if search_text:
            needle = search_text.lower()
            findings = [
                finding for finding in findings
                if any(needle in value.lower() for value in _searchable_fields(finding))
            ]

        severities = _normalize_severities(severity_filter)
        if severities:
            findings = [finding for finding in findings if finding.severity.value in severities]

        if compliance_filter:
            wanted = set(compliance_filter)
            findings = [finding for finding in findings if wanted.intersection(finding.compliance_tags)]

        findings = self._sort(findings, sort_by)

        skip = (page - 1) * page_size
        return QueryPage(
            items=tuple(findings[skip:skip + page_size]),
            total_count=len(findings),
            summary=SeveritySummary.from_findings(findings, urls_analyzed=len(results)),
            page=page,
            page_size=page_size
        )

    @staticmethod
    def _sort(findings: List[Finding], sort_by: str) -> List[Finding]:
        if sort_by == "severity":
            return sorted(findings, key=_severity_rank)
        if sort_by == "url":
            return sorted(findings, key=lambda finding: finding.source_url)
        if sort_by == "date":
            return sorted(findings, key=lambda finding: finding.detected_at, reverse=True)
        return findings
