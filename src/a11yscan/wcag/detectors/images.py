# src/a11yscan/wcag/detectors/images.py

from typing import List

from ..document import DocumentModel
from ..findings import Finding, Impact
from .base import DetectorGroup, detector, element_finding

DECORATIVE_ROLES = ("presentation", "none")


@detector("image-alt", DetectorGroup.CORE)
def missing_alt_text(document: DocumentModel, url: str) -> List[Finding]:
    """Bilder ohne alt-Attribut"""
    findings = []
    for img in document.find_all("img"):
        if img.has_attr("alt"):
            continue
        findings.append(element_finding(
            "image-alt", document, img, url,
            message="Image is missing alt text",
            remediation="Images must have alternative text to convey their purpose to screen reader users",
            impact=Impact.SERIOUS,
            tags=("wcag2a", "wcag111", "section508")
        ))
    return findings


@detector("image-alt-decorative", DetectorGroup.CORE)
def decorative_alt_miscoded(document: DocumentModel, url: str) -> List[Finding]:
    """Leeres alt ohne Kennzeichnung als dekorativ"""
    findings = []
    for img in document.find_all("img", attrs={"alt": True}):
        if img.get("alt", "").strip():
            continue
        role = (img.get("role") or "").strip().lower()
        if role in DECORATIVE_ROLES:
            continue
        findings.append(element_finding(
            "image-alt-decorative", document, img, url,
            message="Image has empty alt attribute but is not marked as decorative",
            remediation='Give meaningful images descriptive alt text, or mark decorative images with role="presentation"',
            impact=Impact.MODERATE,
            tags=("wcag2a", "wcag111", "best-practice")
        ))
    return findings
