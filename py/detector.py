"""Win and stuck detection. Pure queries: nothing here mutates the state it is given."""

from rules import (
    is_card_placable_on_foundation,
    is_card_placable_on_tableau,
    is_move_productive,
)
from state import GameState

DEFAULT_STOCK_CYCLE_LIMIT = 2


def is_won(state: GameState) -> bool:
    return all(len(foundation) == 13 for foundation in state.foundations.values())  # noqa: PLR2004


def _has_foundation_move(state: GameState) -> bool:
    tops = [tableau.inspect_top() for tableau in state.tableaus]
    tops.append(state.waste.inspect_top())
    for card in tops:
        if card is None or not card.face_up:
            continue
        if is_card_placable_on_foundation(card, state.foundations[card.suit], card.suit):
            return True
    return False


def _has_waste_to_tableau_move(state: GameState) -> bool:
    card = state.waste.inspect_top()
    if card is None:
        return False
    return any(is_card_placable_on_tableau(card, tableau) for tableau in state.tableaus)


def _has_productive_tableau_move(state: GameState) -> bool:
    # Covers moving any face-up run, so a face-down card reachable by
    # relocating the run above it is found here as well.
    for source_idx, source in enumerate(state.tableaus):
        for index in range(source.first_visible_index(), len(source)):
            card = source[index]
            for target_idx, target in enumerate(state.tableaus):
                if target_idx == source_idx:
                    continue
                if not is_card_placable_on_tableau(card, target):
                    continue
                if is_move_productive(source, index, target):
                    return True
    return False


def has_hidden_cards(state: GameState) -> bool:
    return any(tableau.hidden_len() > 0 for tableau in state.tableaus)


def stock_exhausted(state: GameState, stock_cycle_limit: int = DEFAULT_STOCK_CYCLE_LIMIT) -> bool:
    """
    True once the stock and waste can no longer help.

    That is when both are empty, or when ``stock_cycle_limit`` recycles have
    happened and no card moved either during the pass the latest recycle
    ended or since that recycle. A recycle that follows a productive pass
    keeps the stock alive for at least one more pass.
    """
    if len(state.stock) == 0 and len(state.waste) == 0:
        return True
    return (
        state.stock_cycles >= stock_cycle_limit
        and state.moves_in_last_cycle == 0
        and state.moves_since_last_cycle == 0
    )


def has_any_legal_move(state: GameState, stock_cycle_limit: int = DEFAULT_STOCK_CYCLE_LIMIT) -> bool:
    if _has_foundation_move(state):
        return True
    if _has_waste_to_tableau_move(state):
        return True
    if _has_productive_tableau_move(state):
        return True
    return not stock_exhausted(state, stock_cycle_limit)


def is_stuck(state: GameState, stock_cycle_limit: int = DEFAULT_STOCK_CYCLE_LIMIT) -> bool:
    return not is_won(state) and not has_any_legal_move(state, stock_cycle_limit)
