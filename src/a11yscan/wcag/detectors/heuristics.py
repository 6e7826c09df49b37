# src/a11yscan/wcag/detectors/heuristics.py
"""
Heuristische Regeln mit niedriger Konfidenz.
Die Treffer sind Hinweise für eine manuelle Prüfung, keine gesicherten Verstöße.
"""

import re
from typing import List, Optional

from ..document import DocumentModel, ElementNode, StyleComputingDocument
from ..findings import Confidence, Finding, Impact
from .base import DetectorGroup, detector, element_finding

SENSORY_PHRASES = (
    "click the button on the right",
    "click the red button",
    "the blue link",
    "the green section",
    "the box on the left",
    "above",
    "below",
    "to the left",
    "to the right",
    "click the round button",
)

_SENSORY_PATTERNS = [
    (phrase, re.compile(r"\b" + re.escape(phrase) + r"\b"))
    for phrase in SENSORY_PHRASES
]

SENSORY_TEXT_ELEMENTS = ["p", "li", "div", "span", "a", "button", "h1", "h2", "h3", "h4", "h5", "h6"]

MINIMUM_LINE_HEIGHT = 1.5

_LINE_HEIGHT = re.compile(r"(?:^|;)\s*line-height\s*:\s*(?P<value>[^;]+)", re.IGNORECASE)
_RELATIVE_VALUE = re.compile(r"^(?P<number>[0-9]*\.?[0-9]+)\s*(?P<unit>%?)$")

READING_ORDER_MIN_TEXT = 20


def _matching_phrase(text: str) -> Optional[str]:
    lowered = text.lower()
    for phrase, pattern in _SENSORY_PATTERNS:
        if pattern.search(lowered):
            return phrase
    return None


@detector("sensory-language", DetectorGroup.WCAG_AAA, heuristic=True)
def sensory_language(document: DocumentModel, url: str) -> List[Finding]:
    """Anweisungen, die sich auf Form, Farbe oder Lage beziehen"""
    matches = {}
    for element in document.find_all(SENSORY_TEXT_ELEMENTS):
        phrase = _matching_phrase(element.text)
        if phrase:
            matches[element] = phrase

    findings = []
    for element, phrase in matches.items():
        # Nur das innerste Element meldet den Treffer
        if any(child in matches for child in element.descendants(SENSORY_TEXT_ELEMENTS)):
            continue
        text = " ".join(element.text.split())
        findings.append(element_finding(
            "sensory-language", document, element, url,
            message=f'Content may rely on sensory characteristics: "{phrase}"',
            remediation="Instructions should not rely solely on sensory characteristics like shape, size, color, or location",
            impact=Impact.MODERATE,
            tags=("wcag2a", "wcag133"),
            auxiliary_data={"phrase": phrase, "text": text},
            confidence=Confidence.LOW
        ))
    return findings


def inline_line_height(element: ElementNode) -> Optional[float]:
    """
    Liest eine relative line-height aus dem style-Attribut

    Args:
        element: Element mit style-Attribut

    Returns:
        Faktor (z.B. 1.2 für "1.2" oder "120%"), None für absolute Werte oder fehlende Angabe
    """
    style = element.get("style") or ""
    match = _LINE_HEIGHT.search(style)
    if not match:
        return None
    value = match.group("value").replace("!important", "").strip()
    relative = _RELATIVE_VALUE.match(value)
    if not relative:
        return None
    number = float(relative.group("number"))
    return number / 100 if relative.group("unit") == "%" else number


@detector("text-spacing", DetectorGroup.WCAG_AAA, heuristic=True)
def restrictive_line_height(document: DocumentModel, url: str) -> List[Finding]:
    """Inline gesetzte line-height unter 1.5"""
    findings = []
    for element in document.find_all(attrs={"style": True}):
        line_height = inline_line_height(element)
        if line_height is None or line_height >= MINIMUM_LINE_HEIGHT:
            continue
        findings.append(element_finding(
            "text-spacing", document, element, url,
            message="Restrictive line height may cause readability issues",
            remediation="Use a line height of at least 1.5 and let users adjust text spacing without loss of content",
            impact=Impact.MODERATE,
            tags=("wcag2aaa", "wcag148"),
            auxiliary_data={"line_height": line_height},
            confidence=Confidence.LOW
        ))
    return findings


@detector("reading-order", DetectorGroup.WCAG_AAA, requires_style=True, heuristic=True)
def positioned_reading_order(document: StyleComputingDocument, url: str) -> List[Finding]:
    """Absolut/fix positionierte Inhalte, die die Lesereihenfolge stören können"""
    findings = []
    for element in document.elements():
        style = document.computed_style(element)
        if style is None or style.position not in ("absolute", "fixed"):
            continue
        text = element.text.strip()
        if len(text) <= READING_ORDER_MIN_TEXT or not element.children:
            continue
        findings.append(element_finding(
            "reading-order", document, element, url,
            message=f"Positioned content may disrupt reading order ({style.position} positioning)",
            remediation="Content should maintain a meaningful sequence when linearized",
            impact=Impact.MODERATE,
            tags=("wcag2a", "wcag132"),
            auxiliary_data={"position": style.position, "z_index": style.z_index},
            confidence=Confidence.LOW
        ))
    return findings
