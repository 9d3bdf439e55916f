"""HTTP fetcher returning raw page markup."""

import logging
import time
from typing import Optional

import requests

from pagescope.config import settings
from pagescope.constants import DEFAULT_URL_SCHEME
from pagescope.exceptions import FetchError, InputError
from pagescope.models import FetchResult
from pagescope.url_utils import is_web_url

logger = logging.getLogger(__name__)


def prepare_url(url: Optional[str]) -> str:
    """Validate a user-supplied URL and default its scheme.

    Args:
        url: URL as entered by the caller

    Returns:
        Absolute http(s) URL. Anything without an http or https scheme and a
        host, such as "example.com" or "httpbin.org", gets https:// prepended.

    Raises:
        InputError: If the URL is missing or blank
    """
    if url is None or not url.strip():
        raise InputError("URL is required")
    url = url.strip()
    return url if is_web_url(url) else f"{DEFAULT_URL_SCHEME}{url}"


class WebCrawler:
    """Fetches single pages with a bounded timeout and redirect count."""

    def __init__(
        self,
        user_agent: Optional[str] = None,
        timeout: Optional[int] = None,
        max_redirects: Optional[int] = None,
    ):
        """Initialize the web crawler.

        Args:
            user_agent: Custom user agent string for requests
            timeout: Request timeout in seconds
            max_redirects: Maximum redirects followed before failing
        """
        self.user_agent = user_agent or settings.USER_AGENT
        self.timeout = timeout if timeout is not None else settings.FETCH_TIMEOUT
        self.max_redirects = (
            max_redirects if max_redirects is not None else settings.MAX_REDIRECTS
        )

        self.session = requests.Session()
        self.session.max_redirects = self.max_redirects
        self.session.headers.update({
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.9",
        })

    def fetch(self, url: str) -> FetchResult:
        """Fetch a URL and return its markup.

        Args:
            url: Absolute URL to fetch

        Returns:
            FetchResult with the decoded HTML and elapsed time

        Raises:
            FetchError: On timeout, connection failure, too many redirects
                or a non-success HTTP status
        """
        logger.info(f"Fetching {url}")
        start_time = time.perf_counter()

        try:
            response = self.session.get(url, timeout=self.timeout, allow_redirects=True)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.warning(f"HTTP error fetching {url}: {e}")
            raise FetchError(str(e), url=url, status_code=status) from e
        except requests.exceptions.Timeout as e:
            logger.warning(f"Timeout fetching {url}")
            raise FetchError(f"Request timeout after {self.timeout}s", url=url) from e
        except requests.exceptions.TooManyRedirects as e:
            logger.warning(f"Too many redirects fetching {url}")
            raise FetchError(
                f"Exceeded {self.max_redirects} redirects", url=url
            ) from e
        except requests.exceptions.ConnectionError as e:
            logger.warning(f"Connection error fetching {url}: {e}")
            raise FetchError(f"Connection error: {e}", url=url) from e
        except requests.exceptions.RequestException as e:
            logger.warning(f"Request failed for {url}: {e}")
            raise FetchError(str(e), url=url) from e

        elapsed_ms = round((time.perf_counter() - start_time) * 1000, 2)
        logger.info(f"Fetched {url} ({response.status_code}, {elapsed_ms} ms)")

        return FetchResult(
            url=url,
            html=response.text,
            status_code=response.status_code,
            final_url=response.url,
            elapsed_ms=elapsed_ms,
            headers=dict(response.headers),
        )

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()
