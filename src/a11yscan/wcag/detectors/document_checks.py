# src/a11yscan/wcag/detectors/document_checks.py

from typing import List

from ..document import DocumentModel
from ..findings import Finding, Impact
from .base import DetectorGroup, detector, document_finding

ROOT_PLACEHOLDER = "<html>...</html>"


@detector("duplicate-id", DetectorGroup.DOCUMENT)
def duplicate_ids(document: DocumentModel, url: str) -> List[Finding]:
    """
    Mehrfach vergebene IDs.
    Ein Finding pro doppeltem ID-Wert; alle Vorkommen stehen in auxiliary_data.
    """
    findings = []
    for element_id, count in document.id_counts().items():
        if count < 2 or not element_id or not element_id.strip():
            continue
        occurrences = document.find_all(attrs={"id": element_id})
        findings.append(document_finding(
            "duplicate-id", url,
            message=f'Duplicate ID: "{element_id}" appears {count} times',
            remediation="IDs must be unique within the document",
            snippet=occurrences[0].outer_html if occurrences else f'<... id="{element_id}">...</...>',
            impact=Impact.SERIOUS,
            tags=("wcag2a", "wcag411"),
            auxiliary_data={
                "id": element_id,
                "count": count,
                "locators": [document.locator_for(node) for node in occurrences]
            }
        ))
    return findings


@detector("document-lang", DetectorGroup.DOCUMENT)
def missing_lang(document: DocumentModel, url: str) -> List[Finding]:
    """lang-Attribut am Wurzelelement fehlt"""
    lang = document.root_lang
    if lang and lang.strip():
        return []
    root = document.root
    snippet = ROOT_PLACEHOLDER
    if root is not None:
        snippet = root.outer_html[:100] + "..."
    return [document_finding(
        "document-lang", url,
        message="Missing language attribute on HTML element",
        remediation="Specify the document language using the lang attribute",
        snippet=snippet,
        impact=Impact.SERIOUS,
        tags=("wcag2a", "wcag311")
    )]


@detector("document-title", DetectorGroup.DOCUMENT)
def missing_title(document: DocumentModel, url: str) -> List[Finding]:
    """Dokumenttitel fehlt oder ist leer"""
    if document.title:
        return []
    return [document_finding(
        "document-title", url,
        message="Missing document title",
        remediation="Provide a descriptive title for the document",
        snippet="<head>...</head>",
        impact=Impact.SERIOUS,
        tags=("wcag2a", "wcag242")
    )]


@detector("document-doctype", DetectorGroup.DOCUMENT)
def missing_doctype(document: DocumentModel, url: str) -> List[Finding]:
    """DOCTYPE-Deklaration fehlt"""
    if document.has_doctype:
        return []
    return [document_finding(
        "document-doctype", url,
        message="Missing DOCTYPE declaration",
        remediation="Include a proper DOCTYPE declaration so the page renders in standards mode",
        snippet=ROOT_PLACEHOLDER,
        impact=Impact.MINOR,
        tags=("best-practice",)
    )]
