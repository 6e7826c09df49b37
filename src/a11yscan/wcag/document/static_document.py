# src/a11yscan/wcag/document/static_document.py

from .base import DocumentModel


class StaticDocument(DocumentModel):
    """
    Reines Markup-Dokument ohne Stilberechnung.
    Kommt ohne Browser aus und bildet die Basis des statischen Durchlaufs.
    """
    pass
