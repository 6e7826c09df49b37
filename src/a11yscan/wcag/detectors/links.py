# src/a11yscan/wcag/detectors/links.py

from typing import List

from ..document import DocumentModel, ElementNode, StyleComputingDocument
from ..findings import Finding, Impact
from .base import DetectorGroup, detector, element_finding, has_text_value

GENERIC_LINK_PHRASES = frozenset({"click here", "here", "more", "read more"})


def _normalized_text(element: ElementNode) -> str:
    return " ".join(element.text.split())


def _has_image_with_alt(element: ElementNode) -> bool:
    return any(img.has_attr("alt") for img in element.descendants(["img"]))


def _has_accessible_name(element: ElementNode) -> bool:
    return bool(
        _normalized_text(element)
        or has_text_value(element, "aria-label")
        or has_text_value(element, "aria-labelledby")
        or has_text_value(element, "title")
    )


@detector("link-empty", DetectorGroup.CORE, render_sensitive=True)
def empty_link(document: DocumentModel, url: str) -> List[Finding]:
    """Links ohne zugänglichen Text"""
    # Nur der gerenderte Durchlauf wertet Bilder mit alt als Linktext
    rendered = isinstance(document, StyleComputingDocument)
    findings = []
    for link in document.find_all("a"):
        if _has_accessible_name(link):
            continue
        if rendered and _has_image_with_alt(link):
            continue
        findings.append(element_finding(
            "link-empty", document, link, url,
            message="Link has no accessible text",
            remediation="Links must have discernible text, an aria-label or a title",
            impact=Impact.SERIOUS,
            tags=("wcag2a", "wcag244", "wcag412", "section508")
        ))
    return findings


@detector("link-generic-text", DetectorGroup.CORE)
def generic_link_text(document: DocumentModel, url: str) -> List[Finding]:
    """Links mit nichtssagendem Text (click here, read more)"""
    findings = []
    for link in document.find_all("a"):
        text = _normalized_text(link).lower()
        if text not in GENERIC_LINK_PHRASES:
            continue
        if has_text_value(link, "aria-label"):
            continue
        findings.append(element_finding(
            "link-generic-text", document, link, url,
            message=f'Link has generic text: "{text}"',
            remediation="Link text should describe the link destination",
            impact=Impact.MODERATE,
            tags=("wcag2a", "wcag244", "best-practice"),
            auxiliary_data={"text": text}
        ))
    return findings


@detector("button-empty", DetectorGroup.CORE)
def empty_button(document: DocumentModel, url: str) -> List[Finding]:
    """Buttons ohne zugänglichen Text"""
    findings = []
    for button in document.find_all("button"):
        if _has_accessible_name(button) or _has_image_with_alt(button):
            continue
        findings.append(element_finding(
            "button-empty", document, button, url,
            message="Button has no accessible text",
            remediation="Buttons must have discernible text or an aria-label",
            impact=Impact.SERIOUS,
            tags=("wcag2a", "wcag412", "section508")
        ))
    return findings
