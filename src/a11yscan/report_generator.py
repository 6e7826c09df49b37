# src/a11yscan/report_generator.py

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

import aiofiles

from .errors.exceptions import ReportGenerationError
from .logging_config import get_logger


class ReportGenerator:
    """Writes the export payload of a batch as JSON reports"""

    def __init__(self, output_dir: Union[str, Path] = "output/results"):
        self.logger = get_logger('ReportGenerator')
        self.output_dir = Path(output_dir)

    async def save_results(self,
                           payload: Dict[str, Any],
                           run_name: Optional[str] = None) -> Path:
        """
        Save findings and summary of a batch

        Args:
            payload: Export payload ({"results", "summary", "scans"})
            run_name: Subdirectory name; defaults to a timestamp

        Returns:
            Path to the run directory

        Raises:
            ReportGenerationError: If the reports cannot be written
        """
        results_dir = self.output_dir / (run_name or datetime.now().strftime('%Y%m%d_%H%M%S'))

        try:
            results_dir.mkdir(parents=True, exist_ok=True)

            async with aiofiles.open(results_dir / "findings.json", 'w', encoding='utf-8') as f:
                await f.write(json.dumps(payload.get("results", []), indent=2, ensure_ascii=False))

            summary = {
                "summary": payload.get("summary", {}),
                "scans": payload.get("scans", [])
            }
            async with aiofiles.open(results_dir / "summary.json", 'w', encoding='utf-8') as f:
                await f.write(json.dumps(summary, indent=2))

        except (OSError, TypeError, ValueError) as e:
            self.logger.error(f"Error saving results: {e}")
            raise ReportGenerationError(f"Could not write reports to {results_dir}: {e}") from e

        self.logger.info(f"Results saved to {results_dir}")
        return results_dir
