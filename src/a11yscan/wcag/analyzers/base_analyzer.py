# src/a11yscan/wcag/analyzers/base_analyzer.py

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from ...config import ComplianceOptions, ScannerSettings
from ...logging_config import get_logger
from ..findings import Finding
from ..orchestrator import AnalysisOrchestrator


@dataclass
class PassResult:
    """Ergebnis eines Analyse-Durchlaufs für eine URL"""
    tool: str
    url: str
    status: str
    findings: List[Finding] = field(default_factory=list)
    error: Optional[str] = None
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    @property
    def succeeded(self) -> bool:
        return self.status == "success"


class BaseToolAnalyzer(ABC):
    """Basisklasse für die Analyse-Durchläufe"""

    def __init__(self,
                 settings: Optional[ScannerSettings] = None,
                 orchestrator: Optional[AnalysisOrchestrator] = None,
                 logger: Optional[logging.Logger] = None):
        """
        Initialisiert den Analyzer

        Args:
            settings: Laufzeit-Einstellungen (Timeouts, Browser)
            orchestrator: Führt die Regeln auf dem Dokument aus
            logger: Optional logger instance
        """
        self.settings = settings or ScannerSettings()
        self.logger = logger or get_logger(self.__class__.__name__)
        self.orchestrator = orchestrator or AnalysisOrchestrator(logger=self.logger)
        self.tool_name = self.__class__.__name__.replace('Analyzer', '').lower()

    async def setup(self) -> bool:
        """
        Prüft die Verfügbarkeit des Durchlaufs

        Returns:
            True wenn Setup erfolgreich, sonst False
        """
        return True

    @abstractmethod
    async def analyze(self, url: str, options: ComplianceOptions) -> PassResult:
        """
        Führt die Analyse durch

        Args:
            url: Zu testende URL
            options: Compliance-Profil

        Returns:
            PassResult mit den Findings des Durchlaufs
        """
        pass

    async def cleanup(self) -> None:
        """Bereinigt verwendete Ressourcen"""
        pass

    def create_result(self,
                      status: str,
                      url: str,
                      findings: Optional[List[Finding]] = None,
                      error: Optional[str] = None) -> PassResult:
        """
        Erstellt ein standardisiertes Ergebnis

        Args:
            status: Status des Durchlaufs
            url: Getestete URL
            findings: Optionale Findings
            error: Optionale Fehlermeldung

        Returns:
            PassResult
        """
        return PassResult(
            tool=self.tool_name,
            url=url,
            status=status,
            findings=list(findings or []),
            error=str(error) if error is not None else None
        )
