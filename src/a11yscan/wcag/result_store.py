# src/a11yscan/wcag/result_store.py

import threading
from typing import Iterable, Tuple

from .findings import Finding, ScanResult


class ResultStore:
    """
    Hält die ScanResults des letzten Batches.
    Der Inhalt wird nur als Ganzes ersetzt; Leser arbeiten auf einem Snapshot.
    """

    def __init__(self, results: Iterable[ScanResult] = ()):
        self._lock = threading.Lock()
        self._results: Tuple[ScanResult, ...] = tuple(results)

    def replace(self, results: Iterable[ScanResult]) -> None:
        snapshot = tuple(results)
        with self._lock:
            self._results = snapshot

    def snapshot(self) -> Tuple[ScanResult, ...]:
        with self._lock:
            return self._results

    def findings(self) -> Tuple[Finding, ...]:
        """Alle Findings des Snapshots in Speicherreihenfolge"""
        return tuple(finding for result in self.snapshot() for finding in result.findings)

    def __len__(self) -> int:
        return len(self.snapshot())
