"""Client library for the Magic: The Gathering catalog API."""

from __future__ import annotations

from .client import CatalogClient, FetchedPage
from .config import CatalogSettings
from .exceptions import (
    CatalogError,
    DecodeError,
    FormatError,
    NotFoundError,
    ServerError,
    TransportError,
)
from .links import parse_next_link
from .models import BoosterContent, Card, ForeignCardName, Legality, Ruling, Set, decode_booster_content
from .query import CardColumn, CardQuery, DEFAULT_PAGE_SIZE, PageResult, SetColumn, SetQuery
from .standard import (
    FormatWindow,
    FormatWindowClient,
    standard_cards,
    standard_set_codes,
    standard_set_names,
    standard_sets,
)

__all__ = [
    "BoosterContent",
    "Card",
    "CardColumn",
    "CardQuery",
    "CatalogClient",
    "CatalogError",
    "CatalogSettings",
    "DEFAULT_PAGE_SIZE",
    "DecodeError",
    "FetchedPage",
    "ForeignCardName",
    "FormatError",
    "FormatWindow",
    "FormatWindowClient",
    "Legality",
    "NotFoundError",
    "PageResult",
    "Ruling",
    "ServerError",
    "Set",
    "SetColumn",
    "SetQuery",
    "TransportError",
    "decode_booster_content",
    "parse_next_link",
    "standard_cards",
    "standard_set_codes",
    "standard_set_names",
    "standard_sets",
]
