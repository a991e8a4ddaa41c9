from enum import Enum
from dataclasses import dataclass
from typing import override, Any


class Color(str, Enum):
    RED = "RED"
    BLACK = "BLACK"


class Suit(str, Enum):
    SPADE = "SPADE"
    HEART = "HEART"
    DIAMOND = "DIAMOND"
    CLUB = "CLUB"

    @property
    def color(self) -> Color:
        if self == Suit.HEART or self == Suit.DIAMOND:
            return Color.RED
        elif self == Suit.CLUB or self == Suit.SPADE:
            return Color.BLACK
        else:
            msg = f"Suit {self} has no color"
            raise ValueError(msg)

    @override
    def __str__(self) -> str:
        return {
            Suit.SPADE: "♠",
            Suit.HEART: "♥",
            Suit.DIAMOND: "♦",
            Suit.CLUB: "♣",
        }[self]


class Number(str, Enum):
    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"

    @property
    def int_repr(self) -> int:
        return {
            Number.ACE: 1,
            Number.TWO: 2,
            Number.THREE: 3,
            Number.FOUR: 4,
            Number.FIVE: 5,
            Number.SIX: 6,
            Number.SEVEN: 7,
            Number.EIGHT: 8,
            Number.NINE: 9,
            Number.TEN: 10,
            Number.JACK: 11,
            Number.QUEEN: 12,
            Number.KING: 13,
        }[self]

    @staticmethod
    def number_map() -> dict[int, "Number"]:
        return {item.int_repr: item for item in Number}

    @staticmethod
    def from_int(value: int) -> "Number":
        try:
            return Number.number_map()[value]
        except KeyError:
            msg = f"No card number with value {value}"
            raise ValueError(msg) from None

    @override
    def __str__(self) -> str:
        return self.value

    @override
    def __repr__(self) -> str:
        return self.value

    def __int__(self) -> int:
        return int(self.int_repr)


@dataclass
class Card:
    """A playing card.

    Identity is the (suit, number) pair; ``face_up`` is the only mutable part
    and is ignored by equality and hashing.
    """

    suit: Suit
    number: Number
    face_up: bool = False

    @property
    def color(self) -> Color:
        return self.suit.color

    @property
    def rank(self) -> int:
        return int(self.number)

    def flip(self, *, face_up: bool) -> None:
        self.face_up = face_up

    def as_jsonable_dict(self) -> dict:
        return {
            "suit": self.suit.value,
            "rank": self.number.value,
            "color": self.suit.color.value,
            "face_up": self.face_up,
        }

    @override
    def __str__(self) -> str:
        return f"{self.number} {self.suit}"

    @override
    def __repr__(self) -> str:
        return f"{self.number} {self.suit}{'' if self.face_up else ' (down)'}"

    @override
    def __eq__(self, other: Any) -> bool:  # pyright: ignore [reportAny]
        if not isinstance(other, Card):
            return False
        return self.suit == other.suit and self.number == other.number

    @override
    def __hash__(self) -> int:
        return hash((self.suit, self.number))


type HidableCard = Card | None


def full_deck() -> list[Card]:
    return [Card(suit, number) for suit in Suit for number in Number]
