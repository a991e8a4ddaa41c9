import random

from cards import full_deck
from deck import create_shuffled_deck, deal


def test_deck_has_every_card_once_face_down():
    deck = create_shuffled_deck(random.Random(1))
    assert len(deck) == 52
    assert len(set(deck)) == 52
    assert all(not card.face_up for card in deck)


def test_same_seed_gives_same_deal():
    first_tableaus, first_stock = deal(create_shuffled_deck(random.Random(42)))
    second_tableaus, second_stock = deal(create_shuffled_deck(random.Random(42)))

    assert [t.inspect_all() for t in first_tableaus] == [t.inspect_all() for t in second_tableaus]
    assert first_stock.inspect_all() == second_stock.inspect_all()


def test_different_seeds_shuffle_differently():
    assert create_shuffled_deck(random.Random(1)) != create_shuffled_deck(random.Random(2))


def test_deal_layout():
    tableaus, stock = deal(create_shuffled_deck(random.Random(3)))

    assert [len(t) for t in tableaus] == [7, 6, 5, 4, 3, 2, 1]
    assert sum(len(t) for t in tableaus) == 28
    assert len(stock) == 24
    for tableau in tableaus:
        assert tableau.visible_len() == 1
        assert tableau.inspect_top().face_up
    assert all(not card.face_up for card in stock)


def test_deal_takes_cards_from_the_top():
    deck = create_shuffled_deck(random.Random(4))
    expected_first = deck[-1]
    expected_last_column = deck[-28]
    tableaus, stock = deal(list(deck))

    assert tableaus[0][0] == expected_first
    assert tableaus[6][0] == expected_last_column
    assert stock.inspect_all() == deck[:24]


class CountingRandom:
    def __init__(self):
        self.calls: list[tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        return b


def test_shuffle_uses_injected_source():
    rng = CountingRandom()
    deck = create_shuffled_deck(rng)
    # j == i on every step leaves the deck in construction order
    assert deck == full_deck()
    assert rng.calls == [(0, i) for i in range(51, 0, -1)]
