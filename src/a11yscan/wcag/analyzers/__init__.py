# src/a11yscan/wcag/analyzers/__init__.py

from .base_analyzer import BaseToolAnalyzer, PassResult
from .html_analyzer import HTMLAnalyzer
from .axe_analyzer import AxeAnalyzer

__all__ = [
    'BaseToolAnalyzer',
    'PassResult',
    'HTMLAnalyzer',
    'AxeAnalyzer'
]
