"""Exceptions raised by the analysis pipeline."""

from typing import Optional


class PageScopeError(Exception):
    """Base class for all analyzer errors."""


class InputError(PageScopeError):
    """The caller supplied a missing or empty URL; nothing was fetched."""


class FetchError(PageScopeError):
    """The page could not be retrieved (timeout, DNS, redirects, HTTP status)."""

    def __init__(self, message: str, url: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class PersistenceError(PageScopeError):
    """The storage backend was unreachable or rejected a write."""
