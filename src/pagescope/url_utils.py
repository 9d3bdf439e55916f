"""URL normalization and classification helpers.

All functions fail soft: malformed input never raises. Callers treat an
empty return from normalize_url() as "drop this element".
"""

import logging
from typing import Optional
from urllib.parse import urljoin, urlparse

from pagescope.constants import IMAGE_EXTENSIONS, WEB_SCHEMES

logger = logging.getLogger(__name__)


def normalize_url(base_url: str, raw: Optional[str]) -> str:
    """Resolve a raw attribute value to an absolute URL.

    Args:
        base_url: URL of the page the value was found on
        raw: href/src attribute value (may be relative, empty or None)

    Returns:
        Absolute URL, the unchanged input for data: and absolute http(s)
        URLs, the original string when it cannot be resolved, or "" for
        empty input.

    Examples:
        >>> normalize_url("https://example.com/a/b", "/x")
        'https://example.com/x'
        >>> normalize_url("https://example.com/a/b", "//cdn.example.com/y.png")
        'https://cdn.example.com/y.png'
    """
    if raw is None:
        return ""
    value = raw.strip()
    if not value:
        return ""

    lowered = value.lower()
    if lowered.startswith('data:'):
        return value
    if lowered.startswith(('http://', 'https://')):
        return value

    try:
        base = urlparse(base_url)
        if value.startswith('//'):
            scheme = base.scheme or 'https'
            return f"{scheme}:{value}"
        if value.startswith('/') and base.scheme and base.netloc:
            return f"{base.scheme}://{base.netloc}{value}"
        return urljoin(base_url, value)
    except ValueError as e:
        logger.debug(f"Could not resolve {value!r} against {base_url!r}: {e}")
        return value


def _hostname(url: str) -> str:
    try:
        return (urlparse(url).hostname or "").lower()
    except ValueError:
        return ""


def is_external(absolute_url: str, base_url: str) -> bool:
    """Check whether a resolved URL points to a different host.

    Args:
        absolute_url: Normalized link URL
        base_url: URL of the page the link was found on

    Returns:
        True iff the URL is http(s) and its host differs from the page host
    """
    try:
        scheme = urlparse(absolute_url).scheme.lower()
    except ValueError:
        return False
    if scheme not in WEB_SCHEMES:
        return False
    return _hostname(absolute_url) != _hostname(base_url)


def is_external_substring(absolute_url: str, base_url: str) -> bool:
    """Legacy external-link test: page hostname not found anywhere in the URL.

    Kept for comparison against historical records. It misclassifies URLs
    that merely mention the page host (e.g. in a query string) as internal.
    """
    try:
        scheme = urlparse(absolute_url).scheme.lower()
    except ValueError:
        return False
    if scheme not in WEB_SCHEMES:
        return False
    hostname = _hostname(base_url)
    return not hostname or hostname not in absolute_url


def is_valid_image_url(url: str) -> bool:
    """Check whether a URL looks like an image resource.

    Accepts data:image/* URIs and absolute http(s) URLs whose path ends in a
    known image extension. Extensionless image endpoints are rejected.
    """
    if not url:
        return False
    if url.lower().startswith('data:image/'):
        return True

    try:
        parsed = urlparse(url)
    except ValueError:
        return False

    if parsed.scheme.lower() not in WEB_SCHEMES or not parsed.netloc:
        return False
    return parsed.path.lower().endswith(IMAGE_EXTENSIONS)


def is_web_url(url: str) -> bool:
    """Check whether a URL is an absolute http(s) URL with a host.

    Non-navigational schemes such as javascript:, mailto: and tel: are
    rejected, as are relative and malformed values.
    """
    if not url:
        return False
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme.lower() in WEB_SCHEMES and bool(parsed.netloc)
