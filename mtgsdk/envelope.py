"""Decoding of the catalog's singular / plural response envelopes."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Generic, List, Mapping, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .exceptions import DecodeError
from .models import Card, Set

EntityT = TypeVar("EntityT", bound=BaseModel)


def load_json(body: bytes) -> Any:
    """Decode a UTF-8 JSON response body."""

    try:
        return json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DecodeError("Catalog returned invalid JSON") from exc


@dataclass(frozen=True, slots=True)
class Envelope(Generic[EntityT]):
    """Describes where entities live in a response body.

    Lookups by id or code answer with the ``singular`` key, collection queries
    with the ``plural`` key. A non-empty singular entry wins over the list.
    """

    model: Type[EntityT]
    singular: str
    plural: str

    def decode(self, body: bytes) -> List[EntityT]:
        payload = load_json(body)
        if not isinstance(payload, Mapping):
            raise DecodeError(f"Expected a JSON object with '{self.singular}' or '{self.plural}'")
        try:
            single = payload.get(self.singular)
            if single:
                return [self.model.model_validate(single)]
            many = payload.get(self.plural)
            if many is None:
                return []
            if not isinstance(many, list):
                raise DecodeError(f"Field '{self.plural}' must be a list, got {type(many).__name__}")
            return [self.model.model_validate(item) for item in many]
        except ValidationError as exc:
            raise DecodeError(f"Could not decode {self.model.__name__} payload: {exc}") from exc


CARD_ENVELOPE: Envelope[Card] = Envelope(Card, "card", "cards")
SET_ENVELOPE: Envelope[Set] = Envelope(Set, "set", "sets")


__all__ = ["CARD_ENVELOPE", "Envelope", "SET_ENVELOPE", "load_json"]
