from enum import Enum
from typing import override, Iterator

from cards import Card, HidableCard, Suit


class Stack:
    def __init__(self, initial_cards: list[Card] | None = None):
        self.cards: list[Card] = list(initial_cards or [])

    def as_jsonable_dict(self) -> dict:
        return {
            "cards": [card.as_jsonable_dict() for card in self.cards],
        }

    @override
    def __str__(self) -> str:
        return f"Stack: {self.cards}"

    def add_to_top(self, card: Card) -> None:
        self.cards.append(card)

    def add_multiple_to_top(self, cards: list[Card]) -> None:
        self.cards.extend(cards)

    def inspect_top(self) -> HidableCard:
        if len(self.cards) == 0:
            return None
        return self.cards[-1]

    def inspect_all(self) -> list[Card]:
        return self.cards.copy()

    def get_from_top(self) -> HidableCard:
        if len(self.cards) == 0:
            return None
        return self.cards.pop()

    def get_multiple_from_top(self, count: int) -> list[Card]:
        """Remove the top ``count`` cards, keeping their bottom-to-top order."""
        if count <= 0:
            return []
        taken = self.cards[-count:]
        del self.cards[-count:]
        return taken

    def get_all(self) -> list[Card]:
        cards = self.cards
        self.cards = []
        return cards

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __getitem__(self, index: int) -> Card:
        return self.cards[index]


class Tableau(Stack):
    """A playing column: a face-down prefix followed by a face-up run."""

    @override
    def __str__(self) -> str:
        return f"Tableau: {self.cards}"

    def hidden_len(self) -> int:
        return sum(1 for card in self.cards if not card.face_up)

    def visible_len(self) -> int:
        return len(self.cards) - self.hidden_len()

    def first_visible_index(self) -> int:
        for idx, card in enumerate(self.cards):
            if card.face_up:
                return idx
        return len(self.cards)

    def inspect_all_hidable(self) -> list[HidableCard]:
        return [card if card.face_up else None for card in self.cards]

    def reveal_top(self) -> HidableCard:
        """Turn the top card face up if it is face down; return it if flipped."""
        top = self.inspect_top()
        if top is None or top.face_up:
            return None
        top.flip(face_up=True)
        return top


class Location(str, Enum):
    STOCK = "STOC"
    WASTE = "WAST"
    FOUNDATION_SPADE = "FOUN_S"
    FOUNDATION_HEART = "FOUN_H"
    FOUNDATION_DIAMOND = "FOUN_D"
    FOUNDATION_CLUB = "FOUN_C"
    TABLEAU_1 = "TABL_1"
    TABLEAU_2 = "TABL_2"
    TABLEAU_3 = "TABL_3"
    TABLEAU_4 = "TABL_4"
    TABLEAU_5 = "TABL_5"
    TABLEAU_6 = "TABL_6"
    TABLEAU_7 = "TABL_7"

    @staticmethod
    def tableaus() -> list["Location"]:
        return [
            Location.TABLEAU_1,
            Location.TABLEAU_2,
            Location.TABLEAU_3,
            Location.TABLEAU_4,
            Location.TABLEAU_5,
            Location.TABLEAU_6,
            Location.TABLEAU_7,
        ]

    @staticmethod
    def foundations() -> list["Location"]:
        return [
            Location.FOUNDATION_SPADE,
            Location.FOUNDATION_HEART,
            Location.FOUNDATION_DIAMOND,
            Location.FOUNDATION_CLUB,
        ]

    @staticmethod
    def tableau(index: int) -> "Location":
        if not 0 <= index < len(Location.tableaus()):
            msg = f"Invalid tableau index {index}"
            raise ValueError(msg)
        return Location.tableaus()[index]

    @staticmethod
    def foundation(suit: Suit) -> "Location":
        return Location.foundations()[list(Suit).index(suit)]

    @property
    def is_tableau(self) -> bool:
        return self in Location.tableaus()

    @property
    def is_foundation(self) -> bool:
        return self in Location.foundations()

    @property
    def tableau_index(self) -> int:
        return Location.tableaus().index(self)

    @property
    def suit(self) -> Suit:
        return list(Suit)[Location.foundations().index(self)]
