"""Fluent queries over the catalog's paginated collections.

A query accumulates ``column -> value`` filters and turns them into requests::

    query = client.cards().where(CardColumn.SET, "KTK").where(CardColumn.RARITY, "Mythic Rare")
    everything = query.all()
    first = query.page(1, page_size=50)

``where`` mutates the query in place and returns it for chaining. Queries are
not safe to mutate from several threads; ``copy()`` one before handing it to
another worker.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, ClassVar, Dict, Generic, List, Mapping, Optional, TypeVar, Union
from urllib.parse import urljoin

from .envelope import CARD_ENVELOPE, SET_ENVELOPE, EntityT, Envelope
from .exceptions import FormatError
from .links import next_link_from_headers
from .models import Card, Set

if TYPE_CHECKING:  # pragma: no cover
    from .client import CatalogClient

LOGGER = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 500
TOTAL_COUNT_HEADER = "Total-Count"
_INTEGER_RE = re.compile(r"\s*-?\d+\s*", re.ASCII)


class CardColumn(str, Enum):
    """Card filters understood by the catalog."""

    NAME = "name"
    LAYOUT = "layout"
    CMC = "cmc"
    COLORS = "colors"
    COLOR_IDENTITY = "colorIdentity"
    TYPE = "type"
    SUPERTYPES = "supertypes"
    TYPES = "types"
    SUBTYPES = "subtypes"
    RARITY = "rarity"
    SET = "set"
    SET_NAME = "setName"
    TEXT = "text"
    FLAVOR = "flavor"
    ARTIST = "artist"
    NUMBER = "number"
    POWER = "power"
    TOUGHNESS = "toughness"
    LOYALTY = "loyalty"
    FOREIGN_NAME = "foreignName"
    LANGUAGE = "language"
    GAME_FORMAT = "gameFormat"
    LEGALITY = "legality"
    MULTIVERSE_ID = "multiverseid"
    CONTAINS = "contains"
    ID = "id"


class SetColumn(str, Enum):
    """Set filters understood by the catalog."""

    NAME = "name"
    BLOCK = "block"


Column = Union[str, Enum]
QueryT = TypeVar("QueryT", bound="Query")


@dataclass(slots=True)
class PageResult(Generic[EntityT]):
    """Entities of one page and the number of matches reported for the query.

    Without a ``Total-Count`` header ``total_count`` is the size of this page,
    which under-reports multi-page results.
    """

    items: List[EntityT]
    total_count: int


def column_name(column: Column) -> str:
    if isinstance(column, Enum):
        return str(column.value)
    return str(column)


class Query(Generic[EntityT]):
    """Filter accumulator plus the retrieval operations built on it."""

    resource: ClassVar[str]
    envelope: ClassVar[Envelope]

    def __init__(self, client: "CatalogClient", filters: Optional[Mapping[str, str]] = None) -> None:
        self._client = client
        self._filters: Dict[str, str] = dict(filters or {})

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._filters!r})"

    @property
    def filters(self) -> Dict[str, str]:
        return dict(self._filters)

    # ------------------------------------------------------------------ filters
    def where(self: QueryT, column: Column, value: object) -> QueryT:
        """Filter ``column`` by ``value``, replacing any earlier value."""

        self._filters[column_name(column)] = str(value)
        return self

    def copy(self: QueryT) -> QueryT:
        """Return an independent query with the same filters."""

        return type(self)(self._client, self._filters)

    # ---------------------------------------------------------------- retrieval
    def all(self) -> List[EntityT]:
        """Return every matching entity by following ``rel="next"`` links."""

        url: Optional[str] = self._client.build_url(self.resource, self._filters)
        results: List[EntityT] = []
        pages = 0
        while url is not None:
            fetched = self._client.fetch_page(url, self.envelope)
            pages += 1
            results.extend(fetched.items)
            next_url = next_link_from_headers(fetched.headers)
            url = urljoin(url, next_url) if next_url else None
        LOGGER.info("Fetched %d %s over %d page(s)", len(results), self.resource, pages)
        return results

    def page(self, page_num: int, page_size: int = DEFAULT_PAGE_SIZE) -> PageResult[EntityT]:
        """Return one page of results and the total match count."""

        if page_num < 1:
            raise ValueError("page_num must be a positive integer")
        if page_size <= 0:
            raise ValueError("page_size must be a positive integer")

        params = dict(self._filters)
        params["page"] = str(page_num)
        params["pageSize"] = str(page_size)
        fetched = self._client.fetch_page(self._client.build_url(self.resource, params), self.envelope)

        raw_total = fetched.headers.get(TOTAL_COUNT_HEADER) if fetched.headers is not None else None
        if raw_total is None:
            return PageResult(items=fetched.items, total_count=len(fetched.items))
        if _INTEGER_RE.fullmatch(raw_total) is None:
            raise FormatError(TOTAL_COUNT_HEADER, raw_total)
        return PageResult(items=fetched.items, total_count=int(raw_total))


class CardQuery(Query[Card]):
    """Query over ``/cards``."""

    resource = "cards"
    envelope = CARD_ENVELOPE

    def random(self, count: int) -> List[Card]:
        """Return up to ``count`` random cards matching the filters."""

        if count <= 0:
            raise ValueError("count must be a positive integer")
        params = dict(self._filters)
        params["random"] = "true"
        params["pageSize"] = str(count)
        return self._client.fetch_page(self._client.build_url(self.resource, params), self.envelope).items


class SetQuery(Query[Set]):
    """Query over ``/sets``."""

    resource = "sets"
    envelope = SET_ENVELOPE


__all__ = [
    "CardColumn",
    "CardQuery",
    "DEFAULT_PAGE_SIZE",
    "PageResult",
    "Query",
    "SetColumn",
    "SetQuery",
    "TOTAL_COUNT_HEADER",
    "column_name",
]
