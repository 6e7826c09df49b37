from .base import (
    ComputedStyle,
    DocumentModel,
    ElementNode,
    StyleComputingDocument
)
from .static_document import StaticDocument
from .rendered_document import RenderedDocument, SNAPSHOT_SCRIPT

__all__ = [
    'ComputedStyle',
    'DocumentModel',
    'ElementNode',
    'StyleComputingDocument',
    'StaticDocument',
    'RenderedDocument',
    'SNAPSHOT_SCRIPT'
]
