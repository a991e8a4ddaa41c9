from dataclasses import dataclass
from typing import override

from cards import Card
from detector import has_hidden_cards
from piles import Location
from rules import is_card_placable_on_foundation
from state import GameState


@dataclass(unsafe_hash=True, eq=True)
class AutoSolveSuggestion:
    from_location: Location
    to_location: Location
    card: Card

    @override
    def __str__(self) -> str:
        return f"{self.card} : {self.from_location.value} -> {self.to_location.value}"

    @override
    def __repr__(self) -> str:
        return self.__str__()


def is_auto_completable(state: GameState) -> bool:
    return (
        len(state.stock) == 0
        and len(state.waste) == 0
        and not has_hidden_cards(state)
        and any(len(tableau) > 0 for tableau in state.tableaus)
    )


def find_auto_complete_move(state: GameState) -> AutoSolveSuggestion | None:
    """
    Pick the tableau top card to send to its foundation next.

    Among all tops that can legally go up, the lowest rank wins; ties go to
    the leftmost column.
    """
    best: AutoSolveSuggestion | None = None
    for tableau_idx, tableau in enumerate(state.tableaus):
        card = tableau.inspect_top()
        if card is None:
            continue
        if not is_card_placable_on_foundation(card, state.foundations[card.suit], card.suit):
            continue
        if best is None or card.rank < best.card.rank:
            best = AutoSolveSuggestion(
                Location.tableaus()[tableau_idx],
                Location.foundation(card.suit),
                card,
            )
    return best
