from dataclasses import dataclass, field
from typing import override

from cards import Card
from piles import Location


@dataclass(eq=True)
class DrawRecord:
    """Cards turned from the stock onto the waste, in the order they were drawn."""

    cards: list[Card] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.cards)

    @property
    def from_location(self) -> Location:
        return Location.STOCK

    @property
    def to_location(self) -> Location:
        return Location.WASTE

    @override
    def __str__(self) -> str:
        return f"{Location.STOCK.value} -> {Location.WASTE.value} ({self.count})"

    def as_jsonable_dict(self) -> dict:
        return {
            "type": "draw",
            "count": self.count,
            "cards": [card.as_jsonable_dict() for card in self.cards],
        }


@dataclass(eq=True)
class ToTableauRecord:
    from_location: Location
    to_location: Location
    cards: list[Card]
    flipped_card: Card | None = None

    @override
    def __str__(self) -> str:
        return f"{self.from_location.value} -> {self.to_location.value} {self.cards}"

    def as_jsonable_dict(self) -> dict:
        return {
            "type": "to_tableau",
            "from_location": self.from_location.value,
            "to_location": self.to_location.value,
            "cards": [card.as_jsonable_dict() for card in self.cards],
            "flipped_card": self.flipped_card.as_jsonable_dict() if self.flipped_card is not None else None,
        }


@dataclass(eq=True)
class ToFoundationRecord:
    from_location: Location
    to_location: Location
    card: Card
    flipped_card: Card | None = None

    @property
    def cards(self) -> list[Card]:
        return [self.card]

    @override
    def __str__(self) -> str:
        return f"{self.from_location.value} -> {self.to_location.value} {self.card}"

    def as_jsonable_dict(self) -> dict:
        return {
            "type": "to_foundation",
            "from_location": self.from_location.value,
            "to_location": self.to_location.value,
            "card": self.card.as_jsonable_dict(),
            "flipped_card": self.flipped_card.as_jsonable_dict() if self.flipped_card is not None else None,
        }


type MoveRecord = DrawRecord | ToTableauRecord | ToFoundationRecord
