# src/a11yscan/wcag/detectors/base.py

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..document import DocumentModel, ElementNode
from ..findings import Confidence, Finding, Impact

DetectorFunc = Callable[[DocumentModel, str], List[Finding]]


class DetectorGroup(Enum):
    CORE = "core"
    DOCUMENT = "document"
    WCAG_AA = "wcag-aa"
    WCAG_AAA = "wcag-aaa"
    SECTION_508 = "section508"


@dataclass(frozen=True)
class DetectorSpec:
    """Metadaten einer registrierten Regel"""
    name: str
    func: DetectorFunc
    group: DetectorGroup
    requires_style: bool = False
    heuristic: bool = False
    render_sensitive: bool = False
    description: str = ""

    def __call__(self, document: DocumentModel, url: str) -> List[Finding]:
        return self.func(document, url)


_REGISTRY: Dict[str, DetectorSpec] = {}


def detector(name: str,
             group: DetectorGroup,
             requires_style: bool = False,
             heuristic: bool = False,
             render_sensitive: bool = False) -> Callable[[DetectorFunc], DetectorFunc]:
    """
    Registriert eine Regel-Funktion (document, url) -> List[Finding]

    Args:
        name: Eindeutiger Regelname, Präfix aller Finding-IDs
        group: Profilgruppe, die über die Auswahl entscheidet
        requires_style: Regel benötigt ein StyleComputingDocument
        heuristic: Regel ist eine Näherung mit niedriger Konfidenz
        render_sensitive: Regel wertet im gerenderten Durchlauf anders; dessen
            Ergebnis ersetzt dann die statischen Findings der Regel

    Returns:
        Dekorator, der die Funktion unverändert zurückgibt
    """
    def decorator(func: DetectorFunc) -> DetectorFunc:
        if name in _REGISTRY:
            raise ValueError(f"Detector already registered: {name}")
        spec = DetectorSpec(
            name=name,
            func=func,
            group=group,
            requires_style=requires_style,
            heuristic=heuristic,
            render_sensitive=render_sensitive,
            description=(func.__doc__ or "").strip().splitlines()[0] if func.__doc__ else ""
        )
        _REGISTRY[name] = spec
        func.detector_spec = spec
        return func
    return decorator


def registered_detectors() -> List[DetectorSpec]:
    return list(_REGISTRY.values())


def get_detector(name: str) -> DetectorSpec:
    return _REGISTRY[name]


def element_finding(rule: str,
                    document: DocumentModel,
                    element: ElementNode,
                    url: str,
                    message: str,
                    remediation: str,
                    impact: Impact,
                    tags: Iterable[str],
                    auxiliary_data: Optional[Dict[str, Any]] = None,
                    confidence: Confidence = Confidence.HIGH) -> Finding:
    """Finding für ein konkretes Element, inklusive Locator und Snippet"""
    return Finding.create(
        rule=rule,
        url=url,
        message=message,
        remediation=remediation,
        snippet=element.outer_html,
        impact=impact,
        tags=tags,
        locator=document.locator_for(element),
        auxiliary_data=auxiliary_data,
        confidence=confidence
    )


def document_finding(rule: str,
                     url: str,
                     message: str,
                     remediation: str,
                     snippet: str,
                     impact: Impact,
                     tags: Iterable[str],
                     auxiliary_data: Optional[Dict[str, Any]] = None) -> Finding:
    """Finding ohne Elementbezug (z.B. fehlender Titel)"""
    return Finding.create(
        rule=rule,
        url=url,
        message=message,
        remediation=remediation,
        snippet=snippet,
        impact=impact,
        tags=tags,
        auxiliary_data=auxiliary_data
    )


def has_text_value(element: ElementNode, attribute: str) -> bool:
    value = element.get(attribute)
    return bool(value and value.strip())
