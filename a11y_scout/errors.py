# File: a11y_scout/errors.py
"""a11y_scout.errors: иерархия исключений A11yScout.

Per-page errors (:class:`PageError` and subclasses) never leave the crawler:
the page is logged and dropped. Everything else reaches the scan session.
"""

from __future__ import annotations

__all__ = [
    "A11yScoutError",
    "InvalidInput",
    "UserNotFound",
    "BrowserLaunchError",
    "AuditorLoadError",
    "StorageError",
    "PageError",
    "SessionError",
    "NavigationError",
    "AuditError",
]


class A11yScoutError(Exception):
    """Base class for all errors raised by A11yScout."""


class InvalidInput(A11yScoutError):
    """Seed URL or requester identity rejected before any crawl work."""


class UserNotFound(A11yScoutError):
    """The requesting e-mail is not registered in the user store."""

    def __init__(self, email: str) -> None:
        super().__init__(f"User not found: {email}")
        self.email = email


class BrowserLaunchError(A11yScoutError):
    """The browser behind the session provider could not be started."""


class AuditorLoadError(A11yScoutError):
    """The accessibility engine could not be loaded before the crawl."""


class StorageError(A11yScoutError):
    """A write or read against the result store failed."""


class PageError(A11yScoutError):
    """Failure confined to a single page visit."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class SessionError(PageError):
    """The browser session could not start or open a new page."""


class NavigationError(PageError):
    """Navigation timed out or failed on the network level."""


class AuditError(PageError):
    """The accessibility engine failed on a loaded page."""
