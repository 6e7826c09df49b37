# src/a11yscan/wcag/document/base.py

import re
from abc import ABC, abstractmethod
from collections import Counter
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Union

from bs4 import BeautifulSoup, Doctype, Tag

Predicate = Callable[['ElementNode'], bool]

_CSS_IDENT = re.compile(r"^[A-Za-z_][A-Za-z0-9_-]*$")


class ElementNode:
    """
    Einheitliche Sicht auf ein Element des geparsten Dokuments.
    Gleichheit basiert auf Identität des zugrundeliegenden Tags.
    """

    __slots__ = ("_tag", "_document")

    def __init__(self, tag: Tag, document: 'DocumentModel'):
        self._tag = tag
        self._document = document

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ElementNode) and other._tag is self._tag

    def __hash__(self) -> int:
        return id(self._tag)

    def __repr__(self) -> str:
        return f"<ElementNode {self.tag_name}>"

    @property
    def raw(self) -> Tag:
        return self._tag

    @property
    def document(self) -> 'DocumentModel':
        return self._document

    @property
    def tag_name(self) -> str:
        return (self._tag.name or "").lower()

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Liest ein Attribut; Mehrfachwerte (class, rel) werden zusammengefügt"""
        value = self._tag.get(name)
        if value is None:
            return default
        if isinstance(value, (list, tuple)):
            return " ".join(value)
        return value

    def has_attr(self, name: str) -> bool:
        return self._tag.has_attr(name)

    @property
    def attrs(self) -> Dict[str, Any]:
        return dict(self._tag.attrs)

    @property
    def text(self) -> str:
        return self._tag.get_text()

    @property
    def outer_html(self) -> str:
        return str(self._tag)

    @property
    def parent(self) -> Optional['ElementNode']:
        parent = self._tag.parent
        if parent is None or isinstance(parent, BeautifulSoup):
            return None
        return self._document.node(parent)

    @property
    def children(self) -> List['ElementNode']:
        return [self._document.node(child) for child in self._tag.children if isinstance(child, Tag)]

    def ancestors(self) -> Iterator['ElementNode']:
        current = self.parent
        while current is not None:
            yield current
            current = current.parent

    def descendants(self, names: Optional[Iterable[str]] = None) -> List['ElementNode']:
        wanted = {name.lower() for name in names} if names else None
        return [
            self._document.node(tag)
            for tag in self._tag.find_all(True)
            if wanted is None or tag.name.lower() in wanted
        ]

    def closest(self, predicate: Predicate) -> Optional['ElementNode']:
        """Nächstes Element (inklusive self) Richtung Wurzel, das predicate erfüllt"""
        if predicate(self):
            return self
        for ancestor in self.ancestors():
            if predicate(ancestor):
                return ancestor
        return None

    def previous_siblings_of_same_tag(self) -> List['ElementNode']:
        return [
            self._document.node(sibling)
            for sibling in self._tag.find_previous_siblings(self._tag.name)
        ]

    def same_tag_sibling_count(self) -> int:
        """Anzahl gleichnamiger Geschwister inklusive self"""
        parent = self._tag.parent
        if parent is None:
            return 1
        return sum(1 for child in parent.children if isinstance(child, Tag) and child.name == self._tag.name)


@dataclass(frozen=True)
class ComputedStyle:
    """Vom Browser berechnete Stilwerte eines Elements"""
    color: Optional[str] = None
    background_color: Optional[str] = None
    font_size_px: Optional[float] = None
    font_weight: Optional[int] = None
    position: Optional[str] = None
    z_index: Optional[str] = None
    line_height: Optional[str] = None
    display: Optional[str] = None
    visibility: Optional[str] = None

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> 'ComputedStyle':
        """
        Erstellt einen ComputedStyle aus einem Snapshot-Eintrag

        Args:
            record: Dictionary mit den Werten aus getComputedStyle()

        Returns:
            ComputedStyle
        """
        return cls(
            color=record.get("color"),
            background_color=record.get("backgroundColor"),
            font_size_px=_parse_px(record.get("fontSize")),
            font_weight=_parse_weight(record.get("fontWeight")),
            position=record.get("position"),
            z_index=record.get("zIndex"),
            line_height=record.get("lineHeight"),
            display=record.get("display"),
            visibility=record.get("visibility")
        )


def _parse_px(value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    match = re.match(r"^\s*([0-9]*\.?[0-9]+)\s*(px)?\s*$", str(value))
    return float(match.group(1)) if match else None


def _parse_weight(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return int(value)
    text = str(value).strip().lower()
    if text == "bold" or text == "bolder":
        return 700
    if text == "normal" or text == "lighter":
        return 400
    try:
        return int(float(text))
    except ValueError:
        return None


class DocumentModel(ABC):
    """
    Abfragbare Abstraktion über ein geparstes HTML-Dokument.
    Fehlerhaftes Markup wird vom Parser repariert, nie als Fehler gemeldet.
    html5lib baut den Baum nach den Regeln des Browsers (implizite html,
    head, body und tbody), damit Locator beider Durchläufe übereinstimmen.
    """

    parser = "html5lib"

    def __init__(self, markup: Union[str, bytes]):
        self._soup = BeautifulSoup(markup or "", self.parser)
        self._nodes: Dict[int, ElementNode] = {}
        self._elements: Optional[List[ElementNode]] = None
        self._id_counts: Optional[Counter] = None

    @property
    def soup(self) -> BeautifulSoup:
        return self._soup

    def node(self, tag: Tag) -> ElementNode:
        key = id(tag)
        node = self._nodes.get(key)
        if node is None:
            node = ElementNode(tag, self)
            self._nodes[key] = node
        return node

    @property
    def root(self) -> Optional[ElementNode]:
        html = self._soup.find("html")
        return self.node(html) if html is not None else None

    def elements(self) -> List[ElementNode]:
        """Alle Elemente in Dokumentreihenfolge"""
        if self._elements is None:
            self._elements = [self.node(tag) for tag in self._soup.find_all(True)]
        return self._elements

    def find_all(self,
                 names: Optional[Union[str, Sequence[str]]] = None,
                 attrs: Optional[Dict[str, Any]] = None,
                 predicate: Optional[Predicate] = None) -> List[ElementNode]:
        """
        Sucht Elemente nach Tag-Name, Attributen und Prädikat

        Args:
            names: Tag-Name oder Liste von Tag-Namen
            attrs: Attributfilter (True = Attribut vorhanden)
            predicate: Zusätzliches Filterprädikat

        Returns:
            Passende Elemente in Dokumentreihenfolge
        """
        if isinstance(names, str):
            names = [names]
        tags = self._soup.find_all(list(names) if names else True, attrs=attrs or {})
        nodes = [self.node(tag) for tag in tags]
        if predicate is not None:
            nodes = [node for node in nodes if predicate(node)]
        return nodes

    def select(self, css: str) -> List[ElementNode]:
        return [self.node(tag) for tag in self._soup.select(css)]

    def find_by_id(self, element_id: str) -> Optional[ElementNode]:
        tag = self._soup.find(id=element_id)
        return self.node(tag) if tag is not None else None

    @property
    def has_doctype(self) -> bool:
        return any(isinstance(item, Doctype) for item in self._soup.contents)

    @property
    def title(self) -> Optional[str]:
        title = self._soup.find("title")
        if title is None:
            return None
        text = title.get_text().strip()
        return text or None

    @property
    def root_lang(self) -> Optional[str]:
        root = self.root
        if root is None:
            return None
        return root.get("lang")

    def id_counts(self) -> Counter:
        if self._id_counts is None:
            self._id_counts = Counter(
                node.get("id") for node in self.elements() if node.has_attr("id")
            )
        return self._id_counts

    def locator_for(self, element: ElementNode) -> str:
        """
        Generiert einen CSS-Selektor für ein Element

        Args:
            element: Element des Dokuments

        Returns:
            Selektor-Kette, z.B. "html > body > div:nth-of-type(2) > img"
        """
        counts = self.id_counts()
        selectors = []
        current: Optional[ElementNode] = element
        while current is not None:
            element_id = current.get("id")
            # Nur eindeutige, CSS-taugliche IDs verankern den Pfad
            if element_id and counts.get(element_id) == 1 and _CSS_IDENT.match(element_id):
                selectors.append(f"#{element_id}")
                break

            if current.same_tag_sibling_count() > 1:
                index = len(current.previous_siblings_of_same_tag()) + 1
                selectors.append(f"{current.tag_name}:nth-of-type({index})")
            else:
                selectors.append(current.tag_name)
            current = current.parent

        return " > ".join(reversed(selectors))


class StyleComputingDocument(DocumentModel):
    """Dokument mit Zugriff auf berechnete Stile (nur gerenderte Dokumente)"""

    @abstractmethod
    def computed_style(self, element: ElementNode) -> Optional[ComputedStyle]:
        """
        Liefert den berechneten Stil eines Elements

        Args:
            element: Element des Dokuments

        Returns:
            ComputedStyle oder None, wenn keiner erfasst wurde
        """
        pass
