import pytest

from cards import Number, Suit
from conftest import down, up
from piles import Stack, Tableau
from rules import (
    is_card_placable_on_foundation,
    is_card_placable_on_tableau,
    is_move_productive,
    is_valid_run,
    movable_run,
)


@pytest.mark.parametrize(
    "card, pile, expected",
    [
        (up(Suit.SPADE, Number.KING), [], True),
        (up(Suit.HEART, Number.QUEEN), [], False),
        (up(Suit.HEART, Number.SEVEN), [up(Suit.SPADE, Number.EIGHT)], True),
        (up(Suit.DIAMOND, Number.SEVEN), [up(Suit.CLUB, Number.EIGHT)], True),
        (up(Suit.CLUB, Number.SEVEN), [up(Suit.SPADE, Number.EIGHT)], False),
        (up(Suit.HEART, Number.SEVEN), [up(Suit.DIAMOND, Number.EIGHT)], False),
        (up(Suit.HEART, Number.SIX), [up(Suit.SPADE, Number.EIGHT)], False),
        (up(Suit.HEART, Number.NINE), [up(Suit.SPADE, Number.EIGHT)], False),
        (up(Suit.HEART, Number.SEVEN), [down(Suit.SPADE, Number.EIGHT)], False),
    ],
)
def test_tableau_placement(card, pile, expected):
    assert is_card_placable_on_tableau(card, Tableau(pile)) is expected


@pytest.mark.parametrize(
    "card, suit, pile, expected",
    [
        (up(Suit.HEART, Number.ACE), Suit.HEART, [], True),
        (up(Suit.HEART, Number.ACE), Suit.SPADE, [], False),
        (up(Suit.HEART, Number.TWO), Suit.HEART, [], False),
        (up(Suit.HEART, Number.TWO), Suit.HEART, [up(Suit.HEART, Number.ACE)], True),
        (up(Suit.HEART, Number.THREE), Suit.HEART, [up(Suit.HEART, Number.ACE)], False),
        (up(Suit.CLUB, Number.TWO), Suit.HEART, [up(Suit.HEART, Number.ACE)], False),
    ],
)
def test_foundation_placement(card, suit, pile, expected):
    assert is_card_placable_on_foundation(card, Stack(pile), suit) is expected


def test_valid_run():
    assert is_valid_run([up(Suit.SPADE, Number.TEN), up(Suit.HEART, Number.NINE), up(Suit.CLUB, Number.EIGHT)])
    assert not is_valid_run([up(Suit.SPADE, Number.TEN), up(Suit.CLUB, Number.NINE)])
    assert not is_valid_run([up(Suit.SPADE, Number.TEN), up(Suit.HEART, Number.EIGHT)])
    assert not is_valid_run([down(Suit.SPADE, Number.TEN), up(Suit.HEART, Number.NINE)])


def test_movable_run_from_index():
    tableau = Tableau([
        down(Suit.CLUB, Number.TWO),
        up(Suit.SPADE, Number.TEN),
        up(Suit.HEART, Number.NINE),
        up(Suit.CLUB, Number.EIGHT),
    ])

    assert movable_run(tableau, 1) == [
        up(Suit.SPADE, Number.TEN),
        up(Suit.HEART, Number.NINE),
        up(Suit.CLUB, Number.EIGHT),
    ]
    assert movable_run(tableau, -1) == [up(Suit.CLUB, Number.EIGHT)]
    assert movable_run(tableau, 0) is None
    assert movable_run(tableau, 4) is None
    assert movable_run(tableau, -5) is None


def test_oscillation_between_face_up_columns_is_not_productive():
    source = Tableau([up(Suit.SPADE, Number.EIGHT), up(Suit.HEART, Number.SEVEN)])
    target = Tableau([up(Suit.CLUB, Number.EIGHT)])
    assert not is_move_productive(source, 1, target)


def test_revealing_move_is_productive():
    source = Tableau([down(Suit.CLUB, Number.TWO), up(Suit.HEART, Number.SEVEN)])
    target = Tableau([up(Suit.CLUB, Number.EIGHT)])
    assert is_move_productive(source, 1, target)


def test_partial_run_above_face_up_card_is_not_revealing():
    source = Tableau([
        down(Suit.CLUB, Number.TWO),
        up(Suit.DIAMOND, Number.EIGHT),
        up(Suit.SPADE, Number.SEVEN),
    ])
    target = Tableau([up(Suit.HEART, Number.EIGHT)])
    assert not is_move_productive(source, 2, target)


def test_target_hiding_cards_is_productive():
    source = Tableau([up(Suit.SPADE, Number.EIGHT), up(Suit.HEART, Number.SEVEN)])
    target = Tableau([down(Suit.DIAMOND, Number.TWO), up(Suit.CLUB, Number.EIGHT)])
    assert is_move_productive(source, 1, target)


def test_empty_target():
    king_on_cards = Tableau([down(Suit.CLUB, Number.TWO), up(Suit.HEART, Number.KING)])
    lone_king = Tableau([up(Suit.HEART, Number.KING)])
    assert is_move_productive(king_on_cards, 1, Tableau())
    assert not is_move_productive(lone_king, 0, Tableau())

    face_up_run = Tableau([up(Suit.SPADE, Number.EIGHT), up(Suit.HEART, Number.SEVEN)])
    assert is_move_productive(face_up_run, 1, Tableau())
    assert not is_move_productive(face_up_run, 0, Tableau())
