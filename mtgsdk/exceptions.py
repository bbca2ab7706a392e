"""Exception hierarchy raised by the catalog client."""

from __future__ import annotations

from typing import Optional


class CatalogError(RuntimeError):
    """Base exception for every failure surfaced by the catalog client."""


class TransportError(CatalogError):
    """Raised when the request never produced an HTTP response."""


class ServerError(CatalogError):
    """Raised when the catalog answers with a non-success status."""

    def __init__(self, message: str, *, status: Optional[str] = None) -> None:
        super().__init__(message)
        self.status = status
        self.message = message


class DecodeError(CatalogError):
    """Raised when a response body does not match any expected JSON shape."""


class FormatError(CatalogError):
    """Raised when a response header value cannot be interpreted."""

    def __init__(self, header: str, value: str) -> None:
        super().__init__(f"Header '{header}' is not a valid integer: {value!r}")
        self.header = header
        self.value = value


class NotFoundError(CatalogError):
    """Raised when a singular lookup does not resolve to exactly one entity."""

    def __init__(self, kind: str, identifier: str, found: int = 0) -> None:
        if found:
            message = f"{kind} '{identifier}' is ambiguous ({found} matches)"
        else:
            message = f"{kind} '{identifier}' not found"
        super().__init__(message)
        self.kind = kind
        self.identifier = identifier
        self.found = found


__all__ = [
    "CatalogError",
    "DecodeError",
    "FormatError",
    "NotFoundError",
    "ServerError",
    "TransportError",
]
