# src/a11yscan/wcag/__init__.py

from .findings import Confidence, Finding, Impact, ScanResult, SeveritySummary
from .orchestrator import AnalysisOrchestrator, axe_tags
from .query_engine import QueryEngine, QueryPage
from .result_store import ResultStore
from .unified_result_processor import UnifiedResultProcessor
from .wcag_integration_manager import BatchSubmission, EvidenceCapturer, WCAGIntegrationManager

__all__ = [
    'AnalysisOrchestrator',
    'BatchSubmission',
    'Confidence',
    'EvidenceCapturer',
    'Finding',
    'Impact',
    'QueryEngine',
    'QueryPage',
    'ResultStore',
    'ScanResult',
    'SeveritySummary',
    'UnifiedResultProcessor',
    'WCAGIntegrationManager',
    'axe_tags'
]
