import pytest
from typing import Any, Dict, List, Optional

from a11yscan.wcag.document import RenderedDocument, StaticDocument
from a11yscan.wcag.document.rendered_document import INDEX_ATTRIBUTE

TEST_URL = "https://example.com/page"


def style_record(color: str = "rgb(0, 0, 0)",
                 background: str = "rgba(0, 0, 0, 0)",
                 font_size: str = "16px",
                 font_weight: str = "400",
                 position: str = "static",
                 z_index: str = "auto",
                 display: str = "block",
                 visibility: str = "visible") -> Dict[str, Any]:
    """Build a computed style record as returned by the snapshot script"""
    return {
        "color": color,
        "backgroundColor": background,
        "fontSize": font_size,
        "fontWeight": font_weight,
        "position": position,
        "zIndex": z_index,
        "lineHeight": "normal",
        "display": display,
        "visibility": visibility
    }


def build_rendered(body: str,
                   styles: Optional[Dict[str, Dict[str, Any]]] = None,
                   head: str = "<title>Test</title>") -> RenderedDocument:
    """
    Build a RenderedDocument the way the snapshot script would

    Args:
        body: Inner HTML of <body>
        styles: Style records keyed by element id; other elements get the default record
        head: Inner HTML of <head>

    Returns:
        RenderedDocument with computed styles attached by index
    """
    styles = styles or {}
    static = StaticDocument(f'<!DOCTYPE html><html lang="en"><head>{head}</head><body>{body}</body></html>')
    records: List[Dict[str, Any]] = []
    for index, node in enumerate(static.elements()):
        node.raw[INDEX_ATTRIBUTE] = str(index)
        records.append(styles.get(node.get("id") or "", style_record()))
    return RenderedDocument(str(static.soup), records)


@pytest.fixture
def url():
    return TEST_URL


@pytest.fixture
def static_doc():
    """Factory for static documents"""
    def _build(markup: str) -> StaticDocument:
        return StaticDocument(markup)
    return _build


@pytest.fixture
def rendered_doc():
    """Factory for rendered documents with computed styles"""
    return build_rendered


@pytest.fixture
def make_style():
    """Factory for computed style records"""
    return style_record
