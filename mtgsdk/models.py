"""Pydantic models describing the catalog's card and set payloads.

The catalog speaks camelCase JSON and omits (or nulls) most fields that do not
apply to a given card, so every model here:

* maps snake_case attributes to the wire names through aliases,
* ignores fields it does not know about,
* treats ``null`` the same as a missing field so the declared default applies.

Set booster slots are the one polymorphic shape: a slot is either a single
rarity (``"rare"``) or a choice between several (``["rare", "mythic rare"]``).
:class:`BoosterContent` normalises both forms to a list.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    RootModel,
    ValidationError,
    field_validator,
    model_validator,
)

from .exceptions import DecodeError


class CatalogModel(BaseModel):
    """Base class for catalog payloads."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class Ruling(CatalogModel):
    """Additional rule information about a card."""

    date: str = ""
    text: str = ""


class ForeignCardName(CatalogModel):
    """Name of a card in another language."""

    name: str = ""
    language: str = ""
    multiverse_id: Optional[int] = Field(default=None, alias="multiverseid")


class Legality(CatalogModel):
    """Legality of a card in one format (``Legal``, ``Banned`` or ``Restricted``)."""

    format: str = ""
    legality: str = ""


class BoosterContent(RootModel[List[str]]):
    """One booster slot: a single card kind or a list of alternatives."""

    @model_validator(mode="before")
    @classmethod
    def _wrap_single(cls, data: Any) -> Any:
        if isinstance(data, str):
            return [data]
        return data

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __getitem__(self, index: int) -> str:
        return self.root[index]

    def __str__(self) -> str:
        return "|".join(self.root)


def decode_booster_content(raw: Any) -> List[str]:
    """Decode a booster slot given as a string or list of strings."""

    try:
        return BoosterContent.model_validate(raw).root
    except ValidationError as exc:
        raise DecodeError(f"Unexpected booster content. Got {raw!r}") from exc


class Card(CatalogModel):
    """A single card record.

    Split, flip and double-faced cards have one record per face; ``names``
    lists every face. ``number``, ``power`` and ``toughness`` are strings on
    purpose since printed values such as ``"*"`` or ``"12a"`` exist.
    """

    id: str = ""
    name: str = ""
    names: List[str] = Field(default_factory=list)
    mana_cost: str = Field(default="", alias="manaCost")
    cmc: float = 0.0
    colors: List[str] = Field(default_factory=list)
    color_identity: List[str] = Field(default_factory=list, alias="colorIdentity")
    type: str = ""
    types: List[str] = Field(default_factory=list)
    supertypes: List[str] = Field(default_factory=list)
    subtypes: List[str] = Field(default_factory=list)
    rarity: str = ""
    set_code: str = Field(default="", alias="set")
    set_name: str = Field(default="", alias="setName")
    text: str = ""
    flavor: str = ""
    artist: str = ""
    number: str = ""
    power: str = ""
    toughness: str = ""
    loyalty: str = ""
    layout: str = ""
    multiverse_id: str = Field(default="", alias="multiverseid")
    variations: List[str] = Field(default_factory=list)
    image_url: str = Field(default="", alias="imageUrl")
    watermark: str = ""
    border: str = ""
    timeshifted: bool = False
    hand: Optional[int] = None
    life: Optional[int] = None
    reserved: bool = False
    release_date: str = Field(default="", alias="releaseDate")
    starter: bool = False
    rulings: List[Ruling] = Field(default_factory=list)
    foreign_names: List[ForeignCardName] = Field(default_factory=list, alias="foreignNames")
    printings: List[str] = Field(default_factory=list)
    original_text: str = Field(default="", alias="originalText")
    original_type: str = Field(default="", alias="originalType")
    source: str = ""
    legalities: List[Legality] = Field(default_factory=list)

    @field_validator("multiverse_id", "loyalty", "power", "toughness", mode="before")
    @classmethod
    def _stringify_numbers(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    def legality_in(self, format_name: str) -> Optional[str]:
        """Return the legality for ``format_name`` (case-insensitive) if listed."""

        wanted = format_name.lower()
        for entry in self.legalities:
            if entry.format.lower() == wanted:
                return entry.legality
        return None

    def __str__(self) -> str:
        return f"{self.name} ({self.set_code})"


class Set(CatalogModel):
    """An expansion, core set or other product the cards are printed in."""

    code: str = ""
    name: str = ""
    block: str = ""
    gatherer_code: str = Field(default="", alias="gathererCode")
    old_code: str = Field(default="", alias="oldCode")
    magic_cards_info_code: str = Field(default="", alias="magicCardsInfoCode")
    release_date: str = Field(default="", alias="releaseDate")
    border: str = ""
    set_type: str = Field(
        default="",
        validation_alias=AliasChoices("type", "expansion", "set_type"),
        serialization_alias="type",
    )
    online_only: bool = Field(default=False, alias="onlineOnly")
    booster: List[BoosterContent] = Field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.name} ({self.code})"


class ServerErrorEnvelope(CatalogModel):
    """Error body returned alongside non-success statuses; a null status reads as empty."""

    status: str = ""
    error: str

    @field_validator("status", mode="before")
    @classmethod
    def _stringify_status(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value


def dump_entity(entity: BaseModel) -> Dict[str, Any]:
    """Serialise an entity back to its wire (camelCase) representation."""

    return entity.model_dump(mode="json", by_alias=True)


__all__ = [
    "BoosterContent",
    "Card",
    "CatalogModel",
    "ForeignCardName",
    "Legality",
    "Ruling",
    "ServerErrorEnvelope",
    "Set",
    "decode_booster_content",
    "dump_entity",
]
