"""HTTP client for the Magic: The Gathering catalog REST API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from email.message import Message
from http.client import HTTPException
from typing import Generic, List, Mapping, MutableMapping, Optional
from urllib.error import HTTPError, URLError
from urllib.parse import quote, urlencode
from urllib.request import Request, urlopen

from pydantic import ValidationError

from .config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, CatalogSettings, normalise_base_url
from .envelope import CARD_ENVELOPE, SET_ENVELOPE, EntityT, Envelope
from .exceptions import NotFoundError, ServerError, TransportError
from .models import Card, ServerErrorEnvelope, Set
from .query import CardQuery, SetQuery

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class RawResponse:
    """Status, headers and fully read body of one HTTP exchange."""

    url: str
    status: int
    headers: Message
    body: bytes


@dataclass(slots=True)
class FetchedPage(Generic[EntityT]):
    """Entities decoded from one response plus that response's headers."""

    items: List[EntityT]
    headers: Message


def server_error_from_body(status: int, reason: str, body: bytes) -> ServerError:
    """Build a :class:`ServerError` from a non-success response body."""

    status_line = f"{status} {reason}".strip()
    try:
        envelope = ServerErrorEnvelope.model_validate_json(body)
    except ValidationError:
        LOGGER.warning("Catalog answered %s without a decodable error body", status_line)
        return ServerError(status_line, status=str(status))
    return ServerError(envelope.error, status=envelope.status or str(status))


class HTTPJSONClient:
    """Issues blocking GET requests and turns failures into catalog errors."""

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        headers: Optional[MutableMapping[str, str]] = None,
    ) -> None:
        self._timeout = timeout
        self._headers: MutableMapping[str, str] = {
            "Accept": "application/json",
            "User-Agent": user_agent,
        }
        if headers:
            self._headers.update(headers)

    @property
    def timeout(self) -> float:
        return self._timeout

    def get(self, url: str) -> RawResponse:
        """GET ``url`` and return the response once its body is read and closed."""

        request = Request(url, headers=dict(self._headers))
        LOGGER.debug("GET %s", url)
        try:
            with urlopen(request, timeout=self._timeout) as response:
                body = response.read()
                status = getattr(response, "status", 200)
                reason = getattr(response, "reason", "")
                headers = response.headers
        except HTTPError as exc:
            try:
                body = exc.read() or b""
            except (OSError, HTTPException):
                body = b""
            finally:
                exc.close()
            raise server_error_from_body(exc.code, str(exc.reason or ""), body) from exc
        except (URLError, OSError, HTTPException) as exc:
            LOGGER.debug("Transport failure for %s: %s", url, exc)
            raise TransportError(f"Failed to fetch {url}: {exc}") from exc

        if not 200 <= status < 300:
            raise server_error_from_body(status, reason, body)
        return RawResponse(url=url, status=status, headers=headers, body=body)


class CatalogClient(HTTPJSONClient):
    """Client for the card and set endpoints of the catalog.

    Each method performs blocking I/O and raises a
    :class:`~mtgsdk.exceptions.CatalogError` subclass on failure. Nothing is
    retried or cached.
    """

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        headers: Optional[MutableMapping[str, str]] = None,
    ) -> None:
        super().__init__(timeout=timeout, user_agent=user_agent, headers=headers)
        self._base_url = normalise_base_url(base_url)

    @classmethod
    def from_settings(cls, settings: CatalogSettings) -> "CatalogClient":
        return cls(base_url=settings.base_url, timeout=settings.timeout, user_agent=settings.user_agent)

    @property
    def base_url(self) -> str:
        return self._base_url

    # ------------------------------------------------------------------ requests
    def build_url(self, path: str, params: Optional[Mapping[str, str]] = None) -> str:
        """Join ``path`` to the base URL and append ``params`` sorted by key."""

        url = self._base_url + path.lstrip("/")
        if params:
            url = f"{url}?{urlencode(sorted(params.items()))}"
        return url

    def fetch_page(self, url: str, envelope: Envelope[EntityT]) -> FetchedPage[EntityT]:
        """Fetch ``url`` once and decode its entities with ``envelope``."""

        response = self.get(url)
        items = envelope.decode(response.body)
        LOGGER.debug("Decoded %d %s entities from %s", len(items), envelope.model.__name__, url)
        return FetchedPage(items=items, headers=response.headers)

    # ------------------------------------------------------------------- queries
    def cards(self) -> CardQuery:
        return CardQuery(self)

    def sets(self) -> SetQuery:
        return SetQuery(self)

    # ------------------------------------------------------------------- lookups
    def fetch_card(self, card_id: str) -> Card:
        """Return the card with the given id or multiverse id."""

        url = self.build_url(f"cards/{quote(str(card_id), safe='')}")
        cards = self.fetch_page(url, CARD_ENVELOPE).items
        if len(cards) != 1:
            raise NotFoundError("Card", str(card_id), len(cards))
        return cards[0]

    def fetch_set(self, code: str) -> Set:
        """Return the set with the given code."""

        url = self.build_url(f"sets/{quote(code, safe='')}")
        sets = self.fetch_page(url, SET_ENVELOPE).items
        if len(sets) != 1:
            raise NotFoundError("Set", code, len(sets))
        return sets[0]

    def generate_booster(self, code: str) -> List[Card]:
        """Open a simulated booster of the given set."""

        url = self.build_url(f"sets/{quote(code, safe='')}/booster")
        return self.fetch_page(url, CARD_ENVELOPE).items


__all__ = [
    "CatalogClient",
    "FetchedPage",
    "HTTPJSONClient",
    "RawResponse",
    "server_error_from_body",
]
