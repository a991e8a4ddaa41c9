import random

from agent_greedy_heuristic import is_tableau_shuffle, play_game, sample_action
from cards import Number, Suit
from config import KlondikeConfig
from conftest import up
from klondike import Action, Klondike
from piles import Location
from state import GameState


def test_play_game_is_deterministic_per_seed():
    first = play_game(5, max_steps=300)
    second = play_game(5, max_steps=300)
    assert first == second
    win, steps = first
    assert isinstance(win, bool)
    assert 0 <= steps <= 300 + 52


def test_play_game_draw_three():
    win, steps = play_game(8, config=KlondikeConfig(draw_mode=3), max_steps=200)
    assert steps > 0


def test_shuffle_moves_are_never_sampled():
    game = Klondike(KlondikeConfig(check_invariants=False))
    game.state = GameState()
    game.state.tableaus[0].add_multiple_to_top([up(Suit.SPADE, Number.EIGHT), up(Suit.HEART, Number.SEVEN)])
    game.state.tableaus[1].add_to_top(up(Suit.CLUB, Number.EIGHT))
    game.state.tableaus[2].add_to_top(up(Suit.DIAMOND, Number.ACE))

    shuffle = Action(Location.TABLEAU_1, Location.TABLEAU_2, change_index=1)
    to_foundation = Action(Location.TABLEAU_3, Location.FOUNDATION_DIAMOND)
    assert is_tableau_shuffle(game, shuffle)
    assert not is_tableau_shuffle(game, to_foundation)

    rng = random.Random(0)
    picks = {sample_action(game, [shuffle, to_foundation], rng) for _ in range(50)}
    assert picks == {to_foundation}


def test_custom_weights_are_a_tuple():
    game = Klondike(KlondikeConfig(check_invariants=False))
    game.state = GameState()
    game.state.stock.add_to_top(up(Suit.CLUB, Number.KING))
    game.state.tableaus[2].add_to_top(up(Suit.DIAMOND, Number.ACE))

    draw = Action(Location.STOCK, Location.WASTE)
    to_foundation = Action(Location.TABLEAU_3, Location.FOUNDATION_DIAMOND)
    assert isinstance(sample_action.__defaults__[0], tuple)

    rng = random.Random(0)
    weights = (1, 0, 0, 0, 0, 0)
    picks = {sample_action(game, [draw, to_foundation], rng, weights) for _ in range(50)}
    assert picks == {draw}
    assert weights == (1, 0, 0, 0, 0, 0)
