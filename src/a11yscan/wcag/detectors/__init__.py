# src/a11yscan/wcag/detectors/__init__.py

from .base import (
    DetectorGroup,
    DetectorSpec,
    detector,
    get_detector,
    registered_detectors
)

# Registrierung erfolgt beim Import der Regelmodule
from . import images, headings, forms, links, aria, contrast, keyboard, document_checks, heuristics  # noqa: F401

__all__ = [
    'DetectorGroup',
    'DetectorSpec',
    'detector',
    'get_detector',
    'registered_detectors'
]
