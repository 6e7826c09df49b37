# src/a11yscan/errors/exceptions.py

class ScanError(Exception):
    """Basisklasse für Scan-Fehler"""
    pass

class FetchError(ScanError):
    """Dokument konnte nicht geladen werden (DNS, Timeout, Status != 2xx)"""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Failed to fetch {url}: {reason}")
        self.url = url
        self.reason = reason

class RenderingUnavailableError(ScanError):
    """Browser-Engine fehlt oder konnte nicht gestartet werden"""
    pass

class InvalidBatchError(ScanError):
    """Keine gültige URL in der Einreichung"""
    pass

class ReportGenerationError(ScanError):
    """Fehler beim Schreiben der Berichte"""
    pass
