# src/a11yscan/wcag/detectors/aria.py

from typing import List

from ..document import DocumentModel
from ..findings import Finding, Impact
from .base import DetectorGroup, detector, element_finding

VALID_ROLES = frozenset({
    "alert", "alertdialog", "application", "article", "banner", "button",
    "cell", "checkbox", "columnheader", "combobox", "complementary",
    "contentinfo", "definition", "dialog", "directory", "document", "feed",
    "figure", "form", "grid", "gridcell", "group", "heading", "img", "link",
    "list", "listbox", "listitem", "log", "main", "marquee", "math", "menu",
    "menubar", "menuitem", "menuitemcheckbox", "menuitemradio", "navigation",
    "none", "note", "option", "presentation", "progressbar", "radio",
    "radiogroup", "region", "row", "rowgroup", "rowheader", "scrollbar",
    "search", "searchbox", "separator", "slider", "spinbutton", "status",
    "switch", "tab", "table", "tablist", "tabpanel", "term", "textbox",
    "timer", "toolbar", "tooltip", "tree", "treegrid", "treeitem"
})


@detector("aria-role-invalid", DetectorGroup.WCAG_AA)
def invalid_aria_role(document: DocumentModel, url: str) -> List[Finding]:
    """role-Werte außerhalb des gültigen Vokabulars"""
    findings = []
    for element in document.find_all(attrs={"role": True}):
        role = (element.get("role") or "").strip()
        if not role:
            continue
        # role darf eine Liste von Fallback-Rollen enthalten
        invalid = [token for token in role.split() if token.lower() not in VALID_ROLES]
        if not invalid:
            continue
        findings.append(element_finding(
            "aria-role-invalid", document, element, url,
            message=f"Invalid ARIA role: {' '.join(invalid)}",
            remediation="ARIA roles must be valid WAI-ARIA role values",
            impact=Impact.MODERATE,
            tags=("wcag2aa", "wcag412"),
            auxiliary_data={"role": role, "invalid_roles": invalid}
        ))
    return findings
