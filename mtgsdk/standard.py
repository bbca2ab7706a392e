"""Standard-format listings built on a format-window service.

The service publishes, for each set, the date it entered Standard and the date
it leaves (or left) it. A set is in Standard when it has entered already and
has not exited yet.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, MutableMapping, Optional

from pydantic import AliasChoices, Field, ValidationError, field_validator

from .client import CatalogClient, HTTPJSONClient
from .config import DEFAULT_STANDARD_URL, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, CatalogSettings
from .envelope import load_json
from .exceptions import DecodeError
from .models import Card, CatalogModel, Set
from .query import CardColumn

LOGGER = logging.getLogger(__name__)


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class FormatWindow(CatalogModel):
    """Standard legality window of one set."""

    name: str = ""
    code: str = ""
    block: str = ""
    enter_date: Optional[datetime] = Field(default=None, validation_alias=AliasChoices("enterDate", "enter_date"))
    exit_date: Optional[datetime] = Field(default=None, validation_alias=AliasChoices("exitDate", "exit_date"))

    @field_validator("enter_date", "exit_date", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> Any:
        # Newer payloads wrap dates as {"exact": ..., "rough": "Q3 2024"}.
        if isinstance(value, Mapping):
            value = value.get("exact")
        if value is None or value == "":
            return None
        if isinstance(value, str):
            return _utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
        return value

    def is_active(self, now: Optional[datetime] = None) -> bool:
        """Return ``True`` when the set is legal in Standard at ``now``."""

        moment = _utc(now) if now is not None else datetime.now(timezone.utc)
        if self.enter_date is None or _utc(self.enter_date) > moment:
            return False
        return self.exit_date is None or _utc(self.exit_date) > moment


class FormatWindowClient(HTTPJSONClient):
    """One-shot client for the format-window service."""

    def __init__(
        self,
        *,
        url: str = DEFAULT_STANDARD_URL,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        headers: Optional[MutableMapping[str, str]] = None,
    ) -> None:
        super().__init__(timeout=timeout, user_agent=user_agent, headers=headers)
        self._url = url

    @classmethod
    def from_settings(cls, settings: CatalogSettings) -> "FormatWindowClient":
        return cls(url=settings.standard_url, timeout=settings.timeout, user_agent=settings.user_agent)

    @property
    def url(self) -> str:
        return self._url

    def fetch_windows(self) -> List[FormatWindow]:
        payload = load_json(self.get(self._url).body)
        entries = payload.get("sets") if isinstance(payload, Mapping) else payload
        if not isinstance(entries, list):
            raise DecodeError("Format service response did not contain a list of sets")
        try:
            return [FormatWindow.model_validate(entry) for entry in entries]
        except ValidationError as exc:
            raise DecodeError(f"Could not decode format window: {exc}") from exc


def standard_set_codes(format_client: FormatWindowClient, now: Optional[datetime] = None) -> List[str]:
    """Codes of the sets currently in Standard, in service order."""

    windows = format_client.fetch_windows()
    codes = [window.code for window in windows if window.code and window.is_active(now)]
    LOGGER.info("%d of %d sets are currently in Standard", len(codes), len(windows))
    return codes


def standard_sets(
    client: CatalogClient,
    format_client: FormatWindowClient,
    now: Optional[datetime] = None,
) -> List[Set]:
    return [client.fetch_set(code) for code in standard_set_codes(format_client, now)]


def standard_cards(
    client: CatalogClient,
    format_client: FormatWindowClient,
    now: Optional[datetime] = None,
) -> List[Card]:
    """Every card printed in a set that is currently in Standard."""

    codes = standard_set_codes(format_client, now)
    if not codes:
        return []
    return client.cards().where(CardColumn.SET, "|".join(codes)).all()


def standard_set_names(cards: Iterable[Card]) -> Dict[str, str]:
    """Map each set name appearing in ``cards`` to its set code."""

    return {card.set_name: card.set_code for card in cards}


__all__ = [
    "FormatWindow",
    "FormatWindowClient",
    "standard_cards",
    "standard_set_codes",
    "standard_set_names",
    "standard_sets",
]
