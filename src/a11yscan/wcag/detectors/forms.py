# src/a11yscan/wcag/detectors/forms.py

from typing import List

from ..document import DocumentModel, ElementNode
from ..findings import Finding, Impact
from .base import DetectorGroup, detector, element_finding, has_text_value

FORM_CONTROLS = ["input", "select", "textarea"]

UNLABELED_TYPES_EXEMPT = ("hidden", "button", "submit", "reset")


def _has_label(document: DocumentModel, control: ElementNode) -> bool:
    control_id = control.get("id")
    if control_id and document.find_all("label", attrs={"for": control_id}):
        return True
    if control.closest(lambda node: node.tag_name == "label") is not None:
        return True
    return has_text_value(control, "aria-label") or has_text_value(control, "aria-labelledby")


@detector("form-label", DetectorGroup.CORE)
def unlabeled_form_control(document: DocumentModel, url: str) -> List[Finding]:
    """Formular-Controls ohne Label"""
    findings = []
    for control in document.find_all(FORM_CONTROLS):
        # Versteckte Felder und Buttons brauchen kein Label
        control_type = (control.get("type") or "").strip().lower()
        if control_type in UNLABELED_TYPES_EXEMPT:
            continue
        if _has_label(document, control):
            continue
        findings.append(element_finding(
            "form-label", document, control, url,
            message="Form control does not have a label",
            remediation="Associate a <label for> with the control, wrap it in a <label>, or add aria-label / aria-labelledby",
            impact=Impact.CRITICAL,
            tags=("wcag2a", "wcag131", "wcag412", "section508")
        ))
    return findings
