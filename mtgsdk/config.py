"""Runtime settings for the catalog and format-window endpoints."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

DEFAULT_BASE_URL = "https://api.magicthegathering.io/v1/"
DEFAULT_STANDARD_URL = "https://whatsinstandard.com/api/v6/standard.json"
DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = "mtgsdk-python/0.1"


def normalise_base_url(url: str) -> str:
    """Return ``url`` with exactly one trailing slash."""

    if not url or not url.strip():
        raise ValueError("Base URL must not be empty")
    return url.strip().rstrip("/") + "/"


@dataclass(frozen=True)
class CatalogSettings:
    """Endpoints and transport options shared by the clients."""

    base_url: str = DEFAULT_BASE_URL
    standard_url: str = DEFAULT_STANDARD_URL
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_url", normalise_base_url(self.base_url))
        if self.timeout <= 0:
            raise ValueError("timeout must be a positive number of seconds")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CatalogSettings":
        """Build settings from ``MTG_API_BASE_URL``, ``MTG_STANDARD_URL`` and ``MTG_API_TIMEOUT``."""

        env = os.environ if environ is None else environ
        timeout_raw = env.get("MTG_API_TIMEOUT")
        timeout = DEFAULT_TIMEOUT
        if timeout_raw:
            try:
                timeout = float(timeout_raw)
            except ValueError as exc:
                raise ValueError(f"MTG_API_TIMEOUT must be a number, got {timeout_raw!r}") from exc
        return cls(
            base_url=env.get("MTG_API_BASE_URL") or DEFAULT_BASE_URL,
            standard_url=env.get("MTG_STANDARD_URL") or DEFAULT_STANDARD_URL,
            timeout=timeout,
        )

    def with_overrides(self, **changes: object) -> "CatalogSettings":
        """Return a copy with the non-``None`` ``changes`` applied."""

        applied = {key: value for key, value in changes.items() if value is not None}
        return replace(self, **applied)


__all__ = [
    "CatalogSettings",
    "DEFAULT_BASE_URL",
    "DEFAULT_STANDARD_URL",
    "DEFAULT_TIMEOUT",
    "normalise_base_url",
]
