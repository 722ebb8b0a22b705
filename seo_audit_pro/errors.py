from __future__ import annotations

from typing import Iterable


class SeoAuditError(Exception):
    """Base class for audit errors."""


class FetchError(SeoAuditError):
    """A request through the relay failed.

    ``status`` is the upstream HTTP status for non-2xx answers and 0 for
    network errors, timeouts and malformed target URLs.
    """

    def __init__(self, url: str, message: str, status: int = 0):
        super().__init__(f"{url}: {message}")
        self.url = url
        self.message = message
        self.status = status


class UnknownCheckError(SeoAuditError):
    def __init__(self, check_ids: Iterable[str]):
        self.check_ids = sorted(check_ids)
        super().__init__("Unknown audit check(s): " + ", ".join(self.check_ids))
