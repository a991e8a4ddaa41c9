import random
from typing import Protocol

from cards import Card, full_deck
from piles import Stack, Tableau

TABLEAU_COUNT = 7


class RandomSource(Protocol):
    def randint(self, a: int, b: int) -> int: ...


def create_shuffled_deck(rng: RandomSource | None = None) -> list[Card]:
    """
    Build the 52 cards face down and shuffle them with Fisher-Yates.

    Args:
        rng: Source of randomness; pass a seeded ``random.Random`` for a
            reproducible deal. A fresh unseeded generator is used otherwise.

    Returns:
        The shuffled deck, bottom to top.
    """
    if rng is None:
        rng = random.Random()
    deck = full_deck()
    for i in range(len(deck) - 1, 0, -1):
        j = rng.randint(0, i)
        deck[i], deck[j] = deck[j], deck[i]
    return deck


def deal(deck: list[Card]) -> tuple[list[Tableau], Stack]:
    """
    Lay out the triangular tableau from the top of ``deck``.

    Column ``i`` receives ``7 - i`` cards and only the last card dealt to a
    column is face up. Whatever is left becomes the stock, face down.
    """
    hand = Stack(deck)
    tableaus = [Tableau() for _ in range(TABLEAU_COUNT)]
    for idx, tableau in enumerate(tableaus):
        size = TABLEAU_COUNT - idx
        for k in range(size):
            card = hand.get_from_top()
            if card is None:
                msg = f"Deck ran out while dealing column {idx}"
                raise ValueError(msg)
            card.flip(face_up=k == size - 1)
            tableau.add_to_top(card)

    stock = Stack(hand.get_all())
    for card in stock:
        card.flip(face_up=False)
    return tableaus, stock
