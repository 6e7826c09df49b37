# src/a11yscan/wcag/detectors/contrast.py

from typing import List, Optional, Tuple

from bs4 import NavigableString

from ...logging_config import get_logger
from ..document import ComputedStyle, ElementNode, StyleComputingDocument
from ..findings import Finding, Impact
from .base import DetectorGroup, detector, element_finding
from .colors import WHITE, RGBA, contrast_ratio, parse_color

logger = get_logger("detectors")

TEXT_ELEMENTS = ["p", "h1", "h2", "h3", "h4", "h5", "h6", "span", "a", "button", "label", "li"]

NORMAL_TEXT_MINIMUM = 4.5
LARGE_TEXT_MINIMUM = 3.0


def is_large_text(style: ComputedStyle) -> bool:
    size = style.font_size_px or 0.0
    bold = (style.font_weight or 400) >= 700
    return size >= 18 or (size >= 14 and bold)


def resolve_background(document: StyleComputingDocument, element: ElementNode) -> Tuple[RGBA, Optional[str]]:
    """
    Sucht den ersten nicht transparenten Hintergrund Richtung Wurzel

    Args:
        document: Gerendertes Dokument
        element: Startelement

    Returns:
        (Farbe, CSS-Wert); Weiß, wenn kein Hintergrund gefunden wird
    """
    current: Optional[ElementNode] = element
    while current is not None:
        style = document.computed_style(current)
        if style is not None:
            color = parse_color(style.background_color)
            if color is not None and color[3] > 0:
                return color, style.background_color
        current = current.parent
    return WHITE, "rgb(255, 255, 255)"


def _has_own_text(element: ElementNode) -> bool:
    return any(
        type(child) is NavigableString and child.strip()
        for child in element.raw.children
    )


def _is_hidden(style: ComputedStyle) -> bool:
    return style.display == "none" or style.visibility in ("hidden", "collapse")


@detector("color-contrast", DetectorGroup.WCAG_AA, requires_style=True)
def color_contrast(document: StyleComputingDocument, url: str) -> List[Finding]:
    """Unzureichender Kontrast zwischen Text und Hintergrund"""
    findings = []
    for element in document.find_all(TEXT_ELEMENTS):
        style = document.computed_style(element)
        if style is None or _is_hidden(style) or not _has_own_text(element):
            continue

        foreground = parse_color(style.color)
        if foreground is None:
            logger.debug(f"Skipping element with unreadable color: {style.color!r}")
            continue

        background, background_css = resolve_background(document, element)
        ratio = contrast_ratio(foreground, background)
        required = LARGE_TEXT_MINIMUM if is_large_text(style) else NORMAL_TEXT_MINIMUM

        if ratio >= required:
            continue

        findings.append(element_finding(
            "color-contrast", document, element, url,
            message=f"Insufficient color contrast: {ratio:.2f}:1 (required: {required:g}:1)",
            remediation="Text elements must have sufficient color contrast against their background",
            impact=Impact.SERIOUS,
            tags=("wcag2aa", "wcag143"),
            auxiliary_data={
                "text_color": style.color,
                "background_color": background_css,
                "contrast_ratio": round(ratio, 2),
                "required_ratio": required,
                "font_size_px": style.font_size_px,
                "font_weight": style.font_weight,
                "large_text": is_large_text(style)
            }
        ))
    return findings
