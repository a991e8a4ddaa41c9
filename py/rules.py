"""Move legality. Everything here is a pure function of the cards and piles passed in."""

from cards import Card, Number, Suit
from piles import Stack, Tableau


def is_card_placable_on_foundation(card: Card, foundation: Stack, suit: Suit) -> bool:
    if card.suit != suit:
        return False
    if len(foundation) == 0:
        return card.number == Number.ACE
    top_card = foundation.inspect_top()
    if top_card is None:
        return False
    return top_card.suit == card.suit and int(top_card.number) == int(card.number) - 1


def is_card_placable_on_tableau(card: Card, tableau: Stack) -> bool:
    if len(tableau) == 0:
        return card.number == Number.KING
    top_card = tableau.inspect_top()
    if top_card is None or not top_card.face_up:
        return False
    return top_card.suit.color != card.suit.color and int(top_card.number) == int(card.number) + 1


def is_valid_run(cards: list[Card]) -> bool:
    """True if every card is face up and each one sits legally on the one below it."""
    if any(not card.face_up for card in cards):
        return False
    for lower, upper in zip(cards, cards[1:]):
        if lower.color == upper.color or lower.rank != upper.rank + 1:
            return False
    return True


def normalize_index(pile: Stack, index: int) -> int | None:
    if index < 0:
        index += len(pile)
    if not 0 <= index < len(pile):
        return None
    return index


def movable_run(tableau: Tableau, index: int) -> list[Card] | None:
    """
    Return the run from ``index`` through the top of ``tableau``, or None.

    The run must be entirely face up and alternate color in descending rank.
    Negative indices count from the top like list indexing.
    """
    start = normalize_index(tableau, index)
    if start is None:
        return None
    run = tableau.inspect_all()[start:]
    if not is_valid_run(run):
        return None
    return run


def is_move_productive(source: Tableau, index: int, target: Tableau) -> bool:
    """
    Decide whether moving the run at ``index`` from ``source`` onto ``target`` makes progress.

    A move is productive when it reveals a face-down card in the source, or
    when the target still hides a face-down card under its face-up run.
    Shuffling between two fully face-up columns never is.

    An empty target is productive only when the run does not already start
    at the bottom of its own column. This departs from the plain rule that any
    move onto an empty column is productive: under that rule a lone King could
    hop between empty columns forever and the game would never read as stuck.
    """
    start = normalize_index(source, index)
    if start is None:
        return False
    if len(target) == 0:
        return start > 0
    if start > 0 and not source[start - 1].face_up:
        return True
    return target.hidden_len() > 0
