import json
import pytest
from unittest.mock import patch

from a11yscan.errors import ReportGenerationError
from a11yscan.report_generator import ReportGenerator


@pytest.fixture
def sample_payload():
    """Provide an export payload with one finding and one failed URL"""
    return {
        "results": [
            {
                "id": "image-alt-0123456789ab",
                "url": "https://example.com",
                "rule": "image-alt",
                "message": "Image is missing alt text",
                "remediation": "Add an alt attribute describing the image",
                "element": "<img src='test.jpg'>",
                "element_path": "html > body > img",
                "impact": "critical",
                "severity": "critical",
                "tags": ["wcag2a", "wcag111"],
                "source": "static"
            }
        ],
        "summary": {"total": 1, "critical": 1, "serious": 0, "moderate": 0, "minor": 0, "urls_analyzed": 2},
        "scans": [
            {"url": "https://example.com", "summary": {"total": 1}, "error": None, "reduced_confidence": False},
            {"url": "https://broken.example.com", "summary": {"total": 0},
             "error": "Failed to analyze https://broken.example.com: HTTP 500", "reduced_confidence": False}
        ]
    }


class TestReportGenerator:

    def test_initialization(self, tmp_path):
        """Test ReportGenerator initialization"""
        generator = ReportGenerator(tmp_path)
        assert generator.logger is not None
        assert generator.output_dir == tmp_path

    @pytest.mark.asyncio
    async def test_save_results(self, tmp_path, sample_payload):
        """Test that findings and summary are written to the run directory"""
        generator = ReportGenerator(tmp_path)
        results_dir = await generator.save_results(sample_payload, run_name="run1")

        assert results_dir == tmp_path / "run1"
        findings = json.loads((results_dir / "findings.json").read_text(encoding="utf-8"))
        summary = json.loads((results_dir / "summary.json").read_text(encoding="utf-8"))

        assert findings == sample_payload["results"]
        assert summary["summary"]["urls_analyzed"] == 2
        assert summary["scans"][1]["error"].startswith("Failed to analyze")

    @pytest.mark.asyncio
    async def test_default_run_name_is_timestamp(self, tmp_path, sample_payload):
        generator = ReportGenerator(tmp_path)
        results_dir = await generator.save_results(sample_payload)
        assert results_dir.parent == tmp_path
        assert len(results_dir.name) == len("20240101_120000")

    @pytest.mark.asyncio
    async def test_unwritable_output_dir(self, tmp_path, sample_payload):
        """Test error handling when the output location is a file"""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory", encoding="utf-8")

        generator = ReportGenerator(blocker)
        with patch.object(generator.logger, "error") as mock_error:
            with pytest.raises(ReportGenerationError):
                await generator.save_results(sample_payload, run_name="run1")
            mock_error.assert_called_once()

    @pytest.mark.asyncio
    async def test_unserializable_payload(self, tmp_path):
        generator = ReportGenerator(tmp_path)
        with pytest.raises(ReportGenerationError):
            await generator.save_results({"results": [object()]}, run_name="bad")
