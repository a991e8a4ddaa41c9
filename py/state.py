import logging
from collections import Counter
from dataclasses import dataclass, field

from cards import Card, Number, Suit, full_deck
from history import MoveRecord
from piles import Location, Stack, Tableau
from rules import is_valid_run

logger = logging.getLogger(__name__)

DRAW_MODES = (1, 3)

type Snapshot = tuple


class InvariantViolation(RuntimeError):
    """Raised when the engine finds its own state inconsistent. Always a bug, never a player error."""


def _new_foundations() -> dict[Suit, Stack]:
    return {suit: Stack() for suit in Suit}


def _new_tableaus() -> list[Tableau]:
    return [Tableau() for _ in range(len(Location.tableaus()))]


@dataclass
class GameState:
    stock: Stack = field(default_factory=Stack)
    waste: Stack = field(default_factory=Stack)
    foundations: dict[Suit, Stack] = field(default_factory=_new_foundations)
    tableaus: list[Tableau] = field(default_factory=_new_tableaus)
    draw_mode: int = 1
    move_count: int = 0
    stock_cycles: int = 0
    moves_since_last_cycle: int = 0
    # card moves made during the stock pass that the latest recycle ended
    moves_in_last_cycle: int = 0
    history: list[MoveRecord] = field(default_factory=list)
    # history entries below this length predate a stock recycle and cannot be undone
    undo_floor: int = 0

    def __post_init__(self) -> None:
        if self.draw_mode not in DRAW_MODES:
            msg = f"Draw mode must be one of {DRAW_MODES}, got {self.draw_mode}"
            raise ValueError(msg)

    def pile(self, location: Location) -> Stack:
        if location == Location.STOCK:
            return self.stock
        if location == Location.WASTE:
            return self.waste
        if location.is_foundation:
            return self.foundations[location.suit]
        return self.tableaus[location.tableau_index]

    def all_piles(self) -> list[tuple[Location, Stack]]:
        return [(location, self.pile(location)) for location in Location]

    def all_cards(self) -> list[Card]:
        return [card for _, pile in self.all_piles() for card in pile]

    def foundation_count(self) -> int:
        return sum(len(foundation) for foundation in self.foundations.values())

    def snapshot(self) -> Snapshot:
        """A hashable value covering every pile (with face flags) and the game counters."""
        piles = tuple(
            (location.value, tuple((card.suit.value, card.number.value, card.face_up) for card in pile))
            for location, pile in self.all_piles()
        )
        return (
            piles,
            self.draw_mode,
            self.move_count,
            self.stock_cycles,
            self.moves_since_last_cycle,
            self.moves_in_last_cycle,
            len(self.history),
            self.undo_floor,
        )

    def as_jsonable_dict(self) -> dict:
        return {
            "stock": self.stock.as_jsonable_dict(),
            "waste": self.waste.as_jsonable_dict(),
            "foundations": {suit.value: foundation.as_jsonable_dict() for suit, foundation in self.foundations.items()},
            "tableaus": [tableau.as_jsonable_dict() for tableau in self.tableaus],
            "draw_mode": self.draw_mode,
            "move_count": self.move_count,
            "stock_cycles": self.stock_cycles,
            "moves_since_last_cycle": self.moves_since_last_cycle,
            "moves_in_last_cycle": self.moves_in_last_cycle,
            "history": [record.as_jsonable_dict() for record in self.history],
        }


def _fail(msg: str) -> None:
    logger.error("Invariant violation: %s", msg)
    raise InvariantViolation(msg)


def check_invariants(state: GameState) -> None:
    """Raise InvariantViolation if ``state`` is not a legal Klondike position."""
    counts = Counter(state.all_cards())
    universe = Counter(full_deck())
    if counts != universe:
        missing = sorted(str(card) for card in universe - counts)
        extra = sorted(str(card) for card in counts - universe)
        _fail(f"Card conservation broken: missing {missing}, duplicated {extra}")

    for suit, foundation in state.foundations.items():
        for position, card in enumerate(foundation, start=1):
            if card.suit != suit or card.number != Number.from_int(position) or not card.face_up:
                _fail(f"Foundation {suit.value} out of order at position {position}: {card!r}")

    if any(card.face_up for card in state.stock):
        _fail("Face-up card in stock")
    if any(not card.face_up for card in state.waste):
        _fail("Face-down card in waste")

    for idx, tableau in enumerate(state.tableaus):
        start = tableau.first_visible_index()
        if any(not card.face_up for card in tableau.cards[start:]):
            _fail(f"Tableau {idx + 1} has a face-down card above a face-up one")
        if len(tableau) > 0 and start == len(tableau):
            _fail(f"Tableau {idx + 1} has a face-down top card")
        if not is_valid_run(tableau.cards[start:]):
            _fail(f"Tableau {idx + 1} face-up cards are out of sequence")

    if state.move_count != len(state.history):
        _fail(f"Move count {state.move_count} does not match history length {len(state.history)}")
