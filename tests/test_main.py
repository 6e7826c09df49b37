# tests/test_main.py

import pytest
from unittest.mock import patch, MagicMock, AsyncMock

from a11yscan.errors import InvalidBatchError, ReportGenerationError
from a11yscan.main import A11yScanCLI, build_parser, main
from a11yscan.utils import _create_file_server, _is_valid_url, _split_urls, _stop_file_server
from a11yscan.wcag.wcag_integration_manager import BatchSubmission

PAYLOAD = {
    "results": [],
    "summary": {"total": 0, "critical": 0, "serious": 0, "moderate": 0, "minor": 0, "urls_analyzed": 1},
    "scans": [{"url": "https://example.com", "summary": {}, "error": None, "reduced_confidence": True}]
}


@pytest.fixture(autouse=True)
def no_root_logging():
    with patch('a11yscan.main.configure_root_logger'):
        yield


@pytest.fixture
def mock_manager():
    with patch('a11yscan.main.WCAGIntegrationManager') as manager_class:
        manager = manager_class.return_value
        manager.submit = AsyncMock(return_value=BatchSubmission(success=True, count=1))
        manager.export_payload = MagicMock(return_value=PAYLOAD)
        yield manager_class


@pytest.fixture
def mock_reports(tmp_path):
    with patch('a11yscan.main.ReportGenerator') as generator_class:
        generator_class.return_value.save_results = AsyncMock(return_value=tmp_path / "run")
        yield generator_class


def make_cli(*argv):
    return A11yScanCLI(build_parser().parse_args(list(argv)))


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args(["https://example.com"])
        assert args.targets == ["https://example.com"]
        assert args.level is None
        assert args.section508 is None
        assert args.best_practices is None
        assert args.rendered is True
        assert args.verbose is False

    def test_flags(self):
        args = build_parser().parse_args([
            "https://a.example.com", "https://b.example.com",
            "--level", "aaa", "--section508", "--no-best-practices",
            "--experimental", "--no-rendered", "--output", "out", "-v"
        ])
        assert args.targets == ["https://a.example.com", "https://b.example.com"]
        assert args.level == "aaa"
        assert args.section508 is True
        assert args.best_practices is False
        assert args.experimental is True
        assert args.rendered is False
        assert args.output == "out"
        assert args.verbose is True

    def test_invalid_level(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["https://example.com", "--level", "b"])


class TestA11yScanCLI:
    def test_options_from_flags(self):
        cli = make_cli("https://example.com", "--level", "a", "--section508")
        assert cli.options.wcag_level == "a"
        assert cli.options.section508 is True
        assert cli.options.best_practices is True
        assert cli.options.capture_screenshots is False

    @pytest.mark.asyncio
    async def test_run_success(self, mock_manager, mock_reports, tmp_path):
        cli = make_cli("https://example.com", "--no-rendered", "--output", str(tmp_path))

        with patch('builtins.print') as mock_print:
            exit_code = await cli.run()

        assert exit_code == 0
        mock_manager.assert_called_once()
        assert mock_manager.call_args.kwargs["render"] is False
        mock_manager.return_value.submit.assert_awaited_once_with(["https://example.com"], cli.options)
        mock_reports.assert_called_once_with(str(tmp_path))
        mock_print.assert_any_call("URLs analyzed: 1")
        mock_print.assert_any_call("Note: https://example.com was analyzed without the rendered pass")

    @pytest.mark.asyncio
    async def test_run_prints_errors(self, mock_manager, mock_reports):
        mock_manager.return_value.submit = AsyncMock(return_value=BatchSubmission(
            success=True, count=1, errors=["Failed to analyze https://example.com: HTTP 404"]
        ))
        cli = make_cli("https://example.com")

        with patch('builtins.print') as mock_print:
            assert await cli.run() == 0
        mock_print.assert_any_call("- Failed to analyze https://example.com: HTTP 404")

    @pytest.mark.asyncio
    async def test_invalid_batch(self, mock_manager, mock_reports):
        mock_manager.return_value.submit = AsyncMock(side_effect=InvalidBatchError("No valid URLs provided"))
        cli = make_cli("not-a-url")

        with patch('builtins.print'):
            assert await cli.run() == 2
        mock_reports.return_value.save_results.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_report_failure(self, mock_manager, mock_reports):
        mock_reports.return_value.save_results = AsyncMock(side_effect=ReportGenerationError("disk full"))
        cli = make_cli("https://example.com")

        with patch('builtins.print'):
            assert await cli.run() == 1

    @pytest.mark.asyncio
    async def test_local_file_is_served(self, mock_manager, mock_reports, tmp_path):
        page = tmp_path / "page.html"
        page.write_text("<html><body><p>Hi</p></body></html>", encoding="utf-8")
        cli = make_cli(str(page))

        with patch('builtins.print'), patch('a11yscan.main._stop_file_server', wraps=_stop_file_server) as mock_stop:
            assert await cli.run() == 0
        mock_stop.assert_called_once()
        assert not mock_stop.call_args.args[0].temp_dir.exists()

        submitted = mock_manager.return_value.submit.call_args.args[0]
        assert submitted[0].startswith("http://localhost:")
        assert submitted[0].endswith("/index.html")

    def test_main_returns_exit_code(self, mock_manager, mock_reports):
        with patch('builtins.print'):
            assert main(["https://example.com"]) == 0


class TestUtils:
    def test_is_valid_url_valid(self):
        for url in ["http://example.com", "https://example.org/path?q=1", "http://localhost:8000"]:
            assert _is_valid_url(url) is True

    def test_is_valid_url_invalid(self):
        for url in ["example.com", "just_text", "", None, "http://", "ftp://example.net"]:
            assert _is_valid_url(url) is False

    def test_split_urls_keeps_order(self):
        valid, rejected = _split_urls(["https://b.example.com", "bad", " https://a.example.com "])
        assert valid == ["https://b.example.com", "https://a.example.com"]
        assert rejected == ["bad"]

    def test_file_server_lifecycle(self, tmp_path):
        page = tmp_path / "page.html"
        page.write_text("<p>Hi</p>", encoding="utf-8")

        url, server = _create_file_server(str(page))
        temp_dir = server.temp_dir
        assert (temp_dir / "index.html").exists()

        _stop_file_server(server)
        assert not temp_dir.exists()
        assert url.endswith("/index.html")
