# src/a11yscan/wcag/findings.py

import hashlib
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Any, Iterable, List, Optional, Sequence, Tuple

MAX_SNIPPET_LENGTH = 500

WHOLE_DOCUMENT = "whole document"


class Impact(Enum):
    CRITICAL = "critical"
    SERIOUS = "serious"
    MODERATE = "moderate"
    MINOR = "minor"

    @property
    def rank(self) -> int:
        return SEVERITY_RANK[self.value]

    @classmethod
    def parse(cls, value: Any) -> 'Impact':
        """
        Normalisiert verschiedene Severity-Formate

        Args:
            value: Roher Severity-Wert (Impact, String oder None)

        Returns:
            Impact; unbekannte Werte werden zu MODERATE
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return cls.MODERATE
        return cls.MODERATE


SEVERITY_RANK = {
    "critical": 0,
    "serious": 1,
    "moderate": 2,
    "minor": 3
}

UNKNOWN_SEVERITY_RANK = len(SEVERITY_RANK)


class Confidence(Enum):
    HIGH = "high"
    LOW = "low"


def truncate_snippet(snippet: Optional[str], limit: int = MAX_SNIPPET_LENGTH) -> str:
    """Kürzt serialisiertes HTML auf die Speichergrenze"""
    if not snippet:
        return WHOLE_DOCUMENT
    if len(snippet) > limit:
        return snippet[:limit] + "..."
    return snippet


def make_finding_id(rule: str, locator: Optional[str], message: str) -> str:
    """
    Erzeugt eine stabile ID aus Regel, Locator und Meldung

    Args:
        rule: Name der Regel
        locator: Selektor-Kette des Elements (oder None)
        message: Meldungstext

    Returns:
        ID der Form "<rule>-<12 hex>"
    """
    digest = hashlib.sha1(
        "\x1f".join([rule, locator or "", message]).encode("utf-8")
    ).hexdigest()[:12]
    return f"{rule}-{digest}"


@dataclass(frozen=True)
class Finding:
    """Ein konkretes Accessibility-Problem"""
    id: str
    source_url: str
    rule: str
    message: str
    remediation: str
    element_snippet: str
    impact: Impact
    compliance_tags: Tuple[str, ...] = ()
    element_locator: Optional[str] = None
    auxiliary_data: Optional[Dict[str, Any]] = field(default=None, hash=False)
    captured_evidence_path: Optional[str] = None
    source: str = "static"
    confidence: Confidence = Confidence.HIGH
    detected_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def create(cls,
               rule: str,
               url: str,
               message: str,
               remediation: str,
               snippet: Optional[str],
               impact: Any,
               tags: Iterable[str] = (),
               locator: Optional[str] = None,
               auxiliary_data: Optional[Dict[str, Any]] = None,
               source: str = "static",
               confidence: Confidence = Confidence.HIGH) -> 'Finding':
        """Erstellt ein Finding mit stabiler ID und gekürztem Snippet"""
        return cls(
            id=make_finding_id(rule, locator, message),
            source_url=url,
            rule=rule,
            message=message,
            remediation=remediation,
            element_snippet=truncate_snippet(snippet),
            impact=Impact.parse(impact),
            compliance_tags=tuple(tags),
            element_locator=locator,
            auxiliary_data=dict(auxiliary_data) if auxiliary_data else None,
            source=source,
            confidence=confidence
        )

    @property
    def severity(self) -> Impact:
        # impact und severity sind ein und derselbe Wert
        return self.impact

    def with_evidence(self, path: str) -> 'Finding':
        """Gibt eine Kopie mit angehängtem Beweisbild zurück"""
        return replace(self, captured_evidence_path=path)

    def with_id(self, finding_id: str) -> 'Finding':
        return replace(self, id=finding_id)

    def with_source(self, source: str) -> 'Finding':
        return replace(self, source=source)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "url": self.source_url,
            "rule": self.rule,
            "message": self.message,
            "remediation": self.remediation,
            "element": self.element_snippet,
            "element_path": self.element_locator,
            "impact": self.impact.value,
            "severity": self.impact.value,
            "tags": list(self.compliance_tags),
            "details": self.auxiliary_data,
            "screenshot_path": self.captured_evidence_path,
            "source": self.source,
            "confidence": self.confidence.value,
            "created_at": self.detected_at.isoformat()
        }


def assign_unique_ids(findings: Sequence[Finding]) -> List[Finding]:
    """
    Hängt bei kollidierenden IDs einen Vorkommens-Index an ("-2", "-3", ...)

    Args:
        findings: Findings eines Analyse-Durchlaufs

    Returns:
        Findings mit innerhalb des Durchlaufs eindeutigen IDs
    """
    seen: Dict[str, int] = {}
    unique = []
    for finding in findings:
        count = seen.get(finding.id, 0) + 1
        seen[finding.id] = count
        unique.append(finding if count == 1 else finding.with_id(f"{finding.id}-{count}"))
    return unique


@dataclass(frozen=True)
class SeveritySummary:
    """Zählungen pro Schweregrad; wird immer aus Findings berechnet"""
    critical: int = 0
    serious: int = 0
    moderate: int = 0
    minor: int = 0
    total: int = 0
    urls_analyzed: int = 0

    @classmethod
    def from_findings(cls, findings: Iterable[Finding], urls_analyzed: int = 0) -> 'SeveritySummary':
        counts = {impact.value: 0 for impact in Impact}
        total = 0
        for finding in findings:
            counts[finding.severity.value] += 1
            total += 1
        return cls(total=total, urls_analyzed=urls_analyzed, **counts)

    def to_dict(self) -> Dict[str, int]:
        return {
            "critical": self.critical,
            "serious": self.serious,
            "moderate": self.moderate,
            "minor": self.minor,
            "total": self.total,
            "urls_analyzed": self.urls_analyzed
        }


@dataclass(frozen=True)
class ScanResult:
    """Alle Findings einer URL"""
    url: str
    findings: Tuple[Finding, ...] = ()
    error: Optional[str] = None
    reduced_confidence: bool = False

    @property
    def summary(self) -> SeveritySummary:
        return SeveritySummary.from_findings(self.findings, urls_analyzed=1)

    def with_findings(self, findings: Iterable[Finding]) -> 'ScanResult':
        return replace(self, findings=tuple(findings))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "results": [finding.to_dict() for finding in self.findings],
            "summary": self.summary.to_dict(),
            "error": self.error,
            "reduced_confidence": self.reduced_confidence
        }
