"""DOM-level resource counts and timing for a fetched page."""

import time
from typing import Optional

from bs4 import BeautifulSoup

from pagescope.models import PerformanceMetrics


class PerformanceSampler:
    """Counts resource indicators in a parsed document.

    The timer is started when the fetch is initiated; sample() records the
    elapsed time at the moment it is called.
    """

    def __init__(self, started_at: Optional[float] = None):
        """Initialize the sampler.

        Args:
            started_at: time.perf_counter() value when the fetch began (defaults to now)
        """
        self.started_at = started_at if started_at is not None else time.perf_counter()

    def elapsed_ms(self) -> float:
        """Milliseconds since the timer was started."""
        return round((time.perf_counter() - self.started_at) * 1000, 2)

    def sample(self, soup: BeautifulSoup, html: str) -> PerformanceMetrics:
        """Count DOM resources and record elapsed time.

        Args:
            soup: Parsed document
            html: Raw HTML payload

        Returns:
            PerformanceMetrics for the page
        """
        script_count = len(soup.find_all('script'))
        external_styles = soup.select('link[rel~="stylesheet"]')
        style_count = len(external_styles) + len(soup.find_all('style'))
        image_count = len(soup.find_all('img'))

        return PerformanceMetrics(
            load_time_ms=self.elapsed_ms(),
            resource_count=image_count + script_count + style_count,
            total_size_bytes=len((html or "").encode('utf-8')),
            dom_node_count=len(soup.find_all(True)),
            script_count=script_count,
            style_count=style_count,
            image_count=image_count,
            font_count=self._count_fonts(soup, external_styles),
        )

    def _count_fonts(self, soup: BeautifulSoup, external_styles: list) -> int:
        """Count font preloads and font-service stylesheets."""
        preloads = soup.select('link[rel~="preload"][as="font"]')
        font_sheets = [
            link for link in external_styles
            if 'fonts' in (link.get('href') or '').lower()
        ]
        return len(preloads) + len(font_sheets)
