import random

import pytest

from cards import Card, Number, Suit
from config import KlondikeConfig
from klondike import Klondike
from state import GameState


def up(suit: Suit, number: Number) -> Card:
    return Card(suit, number, face_up=True)


def down(suit: Suit, number: Number) -> Card:
    return Card(suit, number, face_up=False)


def fill_foundation(state: GameState, suit: Suit, through: int) -> None:
    for value in range(1, through + 1):
        state.foundations[suit].add_to_top(up(suit, Number.from_int(value)))


def solved_tableau_state() -> GameState:
    """All 52 cards face up in four alternating K-to-A columns, nothing else anywhere."""
    cycles = [
        [Suit.SPADE, Suit.HEART, Suit.CLUB, Suit.DIAMOND],
        [Suit.HEART, Suit.SPADE, Suit.DIAMOND, Suit.CLUB],
        [Suit.CLUB, Suit.DIAMOND, Suit.SPADE, Suit.HEART],
        [Suit.DIAMOND, Suit.CLUB, Suit.HEART, Suit.SPADE],
    ]
    state = GameState()
    for tableau, cycle in zip(state.tableaus, cycles):
        for position, value in enumerate(range(13, 0, -1)):
            tableau.add_to_top(up(cycle[position % 4], Number.from_int(value)))
    return state


@pytest.fixture
def klondike_game():
    game = Klondike()
    game.new_game(rng=random.Random(7))
    return game


@pytest.fixture
def board():
    """An engine over an empty board; tests place only the cards they need."""
    game = Klondike(KlondikeConfig(check_invariants=False, auto_stuck_check=False))
    game.state = GameState()
    return game
