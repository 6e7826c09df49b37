# src/a11yscan/wcag/analyzers/html_analyzer.py

import asyncio
from typing import Union

import aiohttp

from ...config import ComplianceOptions
from ...errors.exceptions import FetchError
from ..document import StaticDocument
from .base_analyzer import BaseToolAnalyzer, PassResult


class HTMLAnalyzer(BaseToolAnalyzer):
    """
    Statischer Durchlauf: lädt das Markup per HTTP und prüft es ohne Browser.
    Ein fehlgeschlagener Abruf entscheidet über den Fehler einer URL.
    """

    async def fetch(self, url: str) -> str:
        """
        Lädt das HTML einer URL

        Args:
            url: Abzurufende URL

        Returns:
            Dekodiertes Markup

        Raises:
            FetchError: Bei DNS-Fehlern, Timeouts oder Status außerhalb 2xx
        """
        timeout = aiohttp.ClientTimeout(total=self.settings.fetch_timeout_s)
        headers = {"User-Agent": self.settings.user_agent}
        try:
            async with aiohttp.ClientSession(timeout=timeout, headers=headers) as session:
                async with session.get(url) as response:
                    if not 200 <= response.status < 300:
                        raise FetchError(url, f"HTTP {response.status}")
                    return await response.text(errors="replace")
        except asyncio.TimeoutError as e:
            raise FetchError(url, f"timed out after {self.settings.fetch_timeout_s}s") from e
        except aiohttp.ClientError as e:
            raise FetchError(url, str(e) or e.__class__.__name__) from e

    def analyze_markup(self,
                       html: Union[str, bytes],
                       url: str,
                       options: ComplianceOptions) -> PassResult:
        """
        Prüft bereits vorliegendes Markup

        Args:
            html: HTML-Quelltext
            url: URL, der die Findings zugeordnet werden
            options: Compliance-Profil

        Returns:
            PassResult des statischen Durchlaufs
        """
        document = StaticDocument(html)
        findings = self.orchestrator.run(document, url, options, source="static")
        self.logger.info(f"HTML analysis completed for {url}: found {len(findings)} issues")
        return self.create_result("success", url, findings=findings)

    async def analyze(self, url: str, options: ComplianceOptions) -> PassResult:
        html = await self.fetch(url)
        return self.analyze_markup(html, url, options)
