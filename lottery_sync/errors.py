"""Custom exceptions for the sync job."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class AppError(Exception):
    """Base application error."""

    code: str
    message: str
    details: Any | None = None

    def __str__(self) -> str:
        return self.message


class MissingCredentialsError(AppError):
    """No usable store credentials; fatal at startup."""

    def __init__(self, message: str = "Missing credentials", details: Any | None = None) -> None:
        super().__init__(code="missing_credentials", message=message, details=details)


class UpstreamError(AppError):
    """The lottery API request failed or returned an unreadable body."""

    def __init__(self, message: str = "Upstream request failed", details: Any | None = None) -> None:
        super().__init__(code="upstream_error", message=message, details=details)


class InvalidResponseError(AppError):
    """The lottery API answered, but not with a usable draw record."""

    def __init__(self, message: str = "Invalid data received from API", details: Any | None = None) -> None:
        super().__init__(code="invalid_response", message=message, details=details)


class StoreError(AppError):
    """A document store read or write failed."""

    def __init__(self, message: str = "Store operation failed", details: Any | None = None) -> None:
        super().__init__(code="store_error", message=message, details=details)
