# src/a11yscan/wcag/detectors/keyboard.py

from typing import List, Optional

from ..document import DocumentModel, ElementNode
from ..findings import Finding, Impact
from .base import DetectorGroup, detector, element_finding

NATIVE_INTERACTIVE_TAGS = frozenset({"a", "button", "input", "select", "textarea"})

INTERACTIVE_ROLES = frozenset({
    "button", "checkbox", "combobox", "link", "menuitem", "menuitemcheckbox",
    "menuitemradio", "option", "radio", "searchbox", "slider", "spinbutton",
    "switch", "tab", "textbox", "treeitem"
})


def _tabindex(element: ElementNode) -> Optional[int]:
    try:
        return int((element.get("tabindex") or "").strip())
    except ValueError:
        return None


@detector("keyboard-inaccessible", DetectorGroup.SECTION_508)
def keyboard_inaccessible(document: DocumentModel, url: str) -> List[Finding]:
    """Klickbare Elemente ohne Tastaturzugang"""
    findings = []
    for element in document.find_all(attrs={"onclick": True}):
        if element.tag_name in NATIVE_INTERACTIVE_TAGS:
            continue
        role = (element.get("role") or "").strip().lower()
        if role in INTERACTIVE_ROLES:
            continue
        if element.has_attr("tabindex"):
            continue
        findings.append(element_finding(
            "keyboard-inaccessible", document, element, url,
            message="Element has click handler but may not be keyboard accessible",
            remediation="Use a native interactive element, or add an interactive role, tabindex and key handlers",
            impact=Impact.CRITICAL,
            tags=("section508", "wcag2a", "wcag211")
        ))
    return findings


@detector("tabindex-positive", DetectorGroup.SECTION_508)
def positive_tabindex(document: DocumentModel, url: str) -> List[Finding]:
    """tabindex > 0 stört die natürliche Tab-Reihenfolge"""
    findings = []
    for element in document.find_all(attrs={"tabindex": True}):
        tabindex = _tabindex(element)
        if tabindex is None or tabindex <= 0:
            continue
        findings.append(element_finding(
            "tabindex-positive", document, element, url,
            message=f"Element has positive tabindex ({tabindex}) which disrupts natural tab order",
            remediation="Avoid using positive tabindex values; rely on document order instead",
            impact=Impact.MODERATE,
            tags=("best-practice", "section508", "wcag243"),
            auxiliary_data={"tabindex": tabindex}
        ))
    return findings
