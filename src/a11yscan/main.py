# src/a11yscan/main.py

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .config import WCAG_LEVELS, ComplianceOptions, load_compliance_defaults, load_settings
from .errors.exceptions import InvalidBatchError, ReportGenerationError
from .logging_config import configure_root_logger, get_logger
from .report_generator import ReportGenerator
from .utils import _create_file_server, _stop_file_server
from .wcag import WCAGIntegrationManager

# Load environment variables from .env file
load_dotenv()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="a11yscan",
        description="Scan web pages for WCAG and Section 508 accessibility issues"
    )
    parser.add_argument("targets", nargs="+", help="URLs or local HTML files to analyze")
    parser.add_argument("--level", choices=WCAG_LEVELS, help="WCAG conformance level (default: aa)")
    parser.add_argument("--section508", action="store_true", default=None, help="Enable Section 508 checks")
    parser.add_argument("--no-best-practices", dest="best_practices", action="store_false", default=None,
                        help="Skip best-practice rules in axe-core")
    parser.add_argument("--experimental", action="store_true", default=None, help="Include experimental axe-core rules")
    parser.add_argument("--no-rendered", dest="rendered", action="store_false",
                        help="Skip the browser-rendered pass (static analysis only)")
    parser.add_argument("--output", help="Directory for findings.json and summary.json")
    parser.add_argument("--config", help="YAML file overriding the default configuration")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


class A11yScanCLI:
    """Command Line Interface for accessibility scans"""

    def __init__(self, args: argparse.Namespace):
        self.args = args
        self.settings = load_settings(args.config)
        configure_root_logger(
            log_dir=self.settings.log_dir,
            console_level=logging.DEBUG if args.verbose else logging.INFO
        )
        self.logger = get_logger('A11yScanCLI', log_dir=self.settings.log_dir)
        self.options = self._build_options()

    def _build_options(self) -> ComplianceOptions:
        options = load_compliance_defaults(self.args.config)
        if self.args.level:
            options.wcag_level = self.args.level
        if self.args.section508 is not None:
            options.section508 = self.args.section508
        if self.args.best_practices is not None:
            options.best_practices = self.args.best_practices
        if self.args.experimental is not None:
            options.experimental = self.args.experimental
        # Beweisbilder erstellt ein externer Dienst, nicht die CLI
        options.capture_screenshots = False
        return options

    async def run(self) -> int:
        """Runs the batch and writes the reports; returns the exit code"""
        servers = []
        urls: List[str] = []
        for target in self.args.targets:
            if Path(target).is_file():
                url, server = _create_file_server(target)
                servers.append(server)
                urls.append(url)
            else:
                urls.append(target)

        try:
            manager = WCAGIntegrationManager(self.settings, render=self.args.rendered, logger=self.logger)
            try:
                submission = await manager.submit(urls, self.options)
            except InvalidBatchError as e:
                self.logger.error(str(e))
                print(f"\nError: {e}")
                return 2

            payload = manager.export_payload()
            self._print_summary(payload, submission.errors)

            generator = ReportGenerator(self.args.output or self.settings.output_dir)
            try:
                results_dir = await generator.save_results(payload)
            except ReportGenerationError as e:
                print(f"\nError writing reports: {e}")
                return 1
            print(f"\nReports written to {results_dir}")
            return 0
        finally:
            for server in servers:
                _stop_file_server(server)

    @staticmethod
    def _print_summary(payload: dict, errors: List[str]) -> None:
        summary = payload["summary"]
        print("\nAccessibility Scan Summary")
        print("==========================")
        print(f"URLs analyzed: {summary['urls_analyzed']}")
        for level in ("critical", "serious", "moderate", "minor"):
            print(f"  {level.capitalize():<9} {summary[level]}")
        print(f"  {'Total':<9} {summary['total']}")
        for scan in payload["scans"]:
            if scan["reduced_confidence"] and not scan["error"]:
                print(f"Note: {scan['url']} was analyzed without the rendered pass")
        if errors:
            print("\nErrors:")
            for error in errors:
                print(f"- {error}")


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the command line interface"""
    args = build_parser().parse_args(argv)
    cli = A11yScanCLI(args)
    return asyncio.run(cli.run())


if __name__ == "__main__":
    sys.exit(main())
