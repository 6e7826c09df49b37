# src/a11yscan/wcag/document/rendered_document.py

from typing import Any, Dict, Mapping, Optional, Sequence, Union

from .base import ComputedStyle, ElementNode, StyleComputingDocument

INDEX_ATTRIBUTE = "data-a11yscan-idx"

# Läuft im Browser: markiert jedes Element mit seinem Index, sammelt die
# berechneten Stile und serialisiert das DOM inklusive Doctype.
SNAPSHOT_SCRIPT = """() => {
    const attr = '%s';
    const elements = Array.from(document.querySelectorAll('*'));
    const styles = elements.map((el, index) => {
        el.setAttribute(attr, String(index));
        const style = window.getComputedStyle(el);
        return {
            color: style.color,
            backgroundColor: style.backgroundColor,
            fontSize: style.fontSize,
            fontWeight: style.fontWeight,
            position: style.position,
            zIndex: style.zIndex,
            lineHeight: style.lineHeight,
            display: style.display,
            visibility: style.visibility
        };
    });
    const doctype = document.doctype ? '<!DOCTYPE ' + document.doctype.name + '>' : '';
    const html = doctype + document.documentElement.outerHTML;
    elements.forEach(el => el.removeAttribute(attr));
    return { html: html, styles: styles };
}""" % INDEX_ATTRIBUTE


class RenderedDocument(StyleComputingDocument):
    """
    Dokument aus einem Browser-Snapshot: serialisiertes DOM plus
    berechnete Stile pro Element.
    """

    def __init__(self, markup: Union[str, bytes], styles: Sequence[Mapping[str, Any]] = ()):
        """
        Initialisiert das gerenderte Dokument

        Args:
            markup: Serialisiertes DOM mit Index-Attributen
            styles: Stil-Einträge, indiziert über das Index-Attribut
        """
        super().__init__(markup)
        self._styles: Dict[int, ComputedStyle] = {}

        for tag in self.soup.find_all(attrs={INDEX_ATTRIBUTE: True}):
            raw_index = tag.attrs.pop(INDEX_ATTRIBUTE)
            try:
                index = int(raw_index)
            except (TypeError, ValueError):
                continue
            if 0 <= index < len(styles):
                self._styles[id(tag)] = ComputedStyle.from_record(styles[index])

    @classmethod
    def from_snapshot(cls, snapshot: Mapping[str, Any]) -> 'RenderedDocument':
        """Erstellt das Dokument aus dem Ergebnis von SNAPSHOT_SCRIPT"""
        return cls(snapshot.get("html", ""), snapshot.get("styles") or [])

    def computed_style(self, element: ElementNode) -> Optional[ComputedStyle]:
        return self._styles.get(id(element.raw))
