# src/a11yscan/wcag/detectors/headings.py

from typing import List

from ..document import DocumentModel, ElementNode
from ..findings import Finding, Impact
from .base import DetectorGroup, detector, document_finding, element_finding

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]

HEADING_COMPLIANCE_TAGS = ("wcag2a", "wcag131", "best-practice")


def _headings(document: DocumentModel) -> List[ElementNode]:
    return document.find_all(HEADING_TAGS)


def _level(heading: ElementNode) -> int:
    return int(heading.tag_name[1])


@detector("heading-skip", DetectorGroup.CORE)
def heading_skip(document: DocumentModel, url: str) -> List[Finding]:
    """Übersprungene Überschriftenebenen"""
    findings = []
    previous_level = None
    for heading in _headings(document):
        level = _level(heading)
        # Die erste Überschrift hat keinen Vorgänger
        if previous_level is not None and level > previous_level + 1:
            findings.append(element_finding(
                "heading-skip", document, heading, url,
                message=f"Heading level skipped from h{previous_level} to h{level}",
                remediation="Heading levels should only increase by one",
                impact=Impact.MODERATE,
                tags=HEADING_COMPLIANCE_TAGS,
                auxiliary_data={"previous_level": previous_level, "level": level}
            ))
        previous_level = level
    return findings


@detector("heading-missing-h1", DetectorGroup.CORE)
def missing_main_heading(document: DocumentModel, url: str) -> List[Finding]:
    """Dokument ohne h1"""
    if document.find_all("h1"):
        return []
    return [document_finding(
        "heading-missing-h1", url,
        message="Document does not have a main heading (h1)",
        remediation="Pages should contain a main heading to describe their content",
        snippet="<body>...</body>",
        impact=Impact.MODERATE,
        tags=HEADING_COMPLIANCE_TAGS
    )]


@detector("heading-first-not-h1", DetectorGroup.CORE)
def first_heading_not_h1(document: DocumentModel, url: str) -> List[Finding]:
    """Erste Überschrift ist kein h1"""
    headings = _headings(document)
    if not headings or _level(headings[0]) == 1:
        return []
    first = headings[0]
    return [element_finding(
        "heading-first-not-h1", document, first, url,
        message=f"First heading is an h{_level(first)}, not an h1",
        remediation="The first heading on a page should be an h1 to properly structure the document",
        impact=Impact.MODERATE,
        tags=HEADING_COMPLIANCE_TAGS
    )]
