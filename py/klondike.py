import json
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, override

from cards import Card, HidableCard, Suit
from config import KlondikeConfig
from deck import create_shuffled_deck, deal
from detector import is_stuck, is_won
from history import DrawRecord, MoveRecord, ToFoundationRecord, ToTableauRecord
from piles import Location, Stack, Tableau
from rules import (
    is_card_placable_on_foundation,
    is_card_placable_on_tableau,
    movable_run,
    normalize_index,
)
from solver import find_auto_complete_move, is_auto_completable
from state import GameState, InvariantViolation, Snapshot, check_invariants

logger = logging.getLogger(__name__)

STATE_CHANGED = "state_changed"
WON = "won"
UNWINNABLE = "unwinnable"
EVENTS = (STATE_CHANGED, WON, UNWINNABLE)


class KlondikeState(str, Enum):
    SETUP = "SETUP"
    PLAYING = "PLAYING"
    WON = "WON"


@dataclass
class CardRef:
    """Names a card by pile and position; -1 is the top card."""

    location: Location
    index: int = -1


@dataclass
class MoveOutcome:
    success: bool
    record: MoveRecord | None = None
    reason: str | None = None
    recycled: bool = False
    flipped: Card | None = None

    @staticmethod
    def rejected(reason: str) -> "MoveOutcome":
        return MoveOutcome(success=False, reason=reason)

    def __bool__(self) -> bool:
        return self.success


@dataclass(kw_only=True, unsafe_hash=True, eq=True)
class Render:
    state: str
    stock: int
    waste: HidableCard
    foundations: list[HidableCard]  # top card on each foundation
    tableaus: list[list[HidableCard]]  # all cards on each tableau with null for hidden cards
    move_count: int
    stock_cycles: int

    def asdict(self) -> dict[str, Any]:
        return {
            "state": self.state,
            "stock": self.stock,
            "waste": self.waste,
            "foundations": self.foundations,
            "tableaus": self.tableaus,
            "move_count": self.move_count,
            "stock_cycles": self.stock_cycles,
        }


@dataclass(unsafe_hash=True, eq=True)
class Action:
    from_location: Location
    to_location: Location
    change_index: int = -1

    @override
    def __str__(self) -> str:
        return f"{self.from_location.value} ({self.change_index}) -> {self.to_location.value}"

    @override
    def __repr__(self) -> str:
        return self.__str__()


type Destination = int | Suit | Location


class Klondike:
    """
    A single Klondike game.

    Every public operation either applies completely or returns a rejected
    MoveOutcome and leaves the state untouched. Listeners registered with
    ``subscribe`` hear about every accepted change.
    """

    def __init__(self, config: KlondikeConfig | None = None) -> None:
        self.config = config or KlondikeConfig()
        self.state = GameState(draw_mode=self.config.draw_mode)
        self.status = KlondikeState.SETUP
        self._listeners: dict[str, list[Callable[..., None]]] = {event: [] for event in EVENTS}
        self._won_announced = False
        self._unwinnable_announced = False

    # -- events ---------------------------------------------------------

    def subscribe(self, event: str, callback: Callable[..., None]) -> None:
        if event not in self._listeners:
            msg = f"Unknown event {event!r}, expected one of {EVENTS}"
            raise ValueError(msg)
        self._listeners[event].append(callback)

    def unsubscribe(self, event: str, callback: Callable[..., None]) -> None:
        if event in self._listeners and callback in self._listeners[event]:
            self._listeners[event].remove(callback)

    def _emit(self, event: str, *args: Any) -> None:
        for callback in list(self._listeners[event]):
            callback(*args)

    def _after_change(self) -> None:
        if self.config.check_invariants:
            check_invariants(self.state)

        won = is_won(self.state)
        self.status = KlondikeState.WON if won else KlondikeState.PLAYING
        self._emit(STATE_CHANGED, self.state)

        if won:
            if not self._won_announced:
                self._won_announced = True
                logger.info("Game won in %d moves", self.state.move_count)
                self._emit(WON)
            return
        self._won_announced = False

        if self.config.auto_stuck_check and not self._unwinnable_announced and self.is_stuck():
            self._unwinnable_announced = True
            logger.info("No productive moves left (draw mode %d)", self.state.draw_mode)
            self._emit(UNWINNABLE, self.state.draw_mode)

    # -- game lifecycle -------------------------------------------------

    def new_game(self, draw_mode: int | None = None, rng: random.Random | None = None) -> GameState:
        """Shuffle, deal and replace the current state wholesale."""
        if draw_mode is None:
            draw_mode = self.config.draw_mode
        if rng is None:
            rng = random.Random(self.config.seed)

        tableaus, stock = deal(create_shuffled_deck(rng))
        self.state = GameState(stock=stock, tableaus=tableaus, draw_mode=draw_mode)
        self.status = KlondikeState.SETUP
        self._won_announced = False
        self._unwinnable_announced = False
        logger.info("New game dealt (draw mode %d)", draw_mode)

        if self.config.check_invariants:
            check_invariants(self.state)
        self._emit(STATE_CHANGED, self.state)
        return self.state

    # -- intents --------------------------------------------------------

    def draw(self) -> MoveOutcome:
        state = self.state
        if len(state.stock) > 0:
            count = min(state.draw_mode, len(state.stock))
            drawn: list[Card] = []
            for _ in range(count):
                card = state.stock.get_from_top()
                assert card is not None  # noqa: S101
                card.flip(face_up=True)
                state.waste.add_to_top(card)
                drawn.append(card)
            record = DrawRecord(drawn)
            state.history.append(record)
            state.move_count += 1
            logger.debug("Drew %s", drawn)
            self._after_change()
            return MoveOutcome(success=True, record=record)

        if len(state.waste) > 0:
            recycled = state.waste.get_all()
            recycled.reverse()
            for card in recycled:
                card.flip(face_up=False)
            state.stock.add_multiple_to_top(recycled)
            state.stock_cycles += 1
            state.moves_in_last_cycle = state.moves_since_last_cycle
            state.moves_since_last_cycle = 0
            state.undo_floor = len(state.history)
            logger.debug("Recycled %d waste cards into stock (cycle %d)", len(recycled), state.stock_cycles)
            self._after_change()
            return MoveOutcome(success=True, recycled=True)

        return self._reject("Stock and waste are both empty")

    def attempt_move(self, card_ref: CardRef | Location, destination: Destination) -> MoveOutcome:
        if isinstance(card_ref, Location):
            card_ref = CardRef(card_ref)
        source = card_ref.location
        target = self._resolve_destination(destination)
        if target is None:
            return self._reject(f"Invalid destination {destination!r}")
        if source == target:
            return self._reject("Source and destination are the same pile")
        if source == Location.STOCK:
            return self._reject("Cards leave the stock only by drawing")

        source_pile = self.state.pile(source)
        index = normalize_index(source_pile, card_ref.index)
        if index is None:
            return self._reject(f"No card at {source.value}[{card_ref.index}]")
        if not source.is_tableau and index != len(source_pile) - 1:
            return self._reject(f"Only the top card of {source.value} can move")

        if target.is_foundation:
            return self._move_to_foundation(source, index, target)
        return self._move_to_tableau(source, index, target)

    def undo(self) -> MoveOutcome:
        state = self.state
        if len(state.history) == 0:
            return self._reject("Nothing to undo")
        if len(state.history) <= state.undo_floor:
            return self._reject("Cannot undo past a stock recycle")

        record = state.history.pop()
        if isinstance(record, DrawRecord):
            for _ in range(record.count):
                card = state.waste.get_from_top()
                assert card is not None  # noqa: S101
                card.flip(face_up=False)
                state.stock.add_to_top(card)
        else:
            target = state.pile(record.to_location)
            source = state.pile(record.from_location)
            cards = target.get_multiple_from_top(len(record.cards))
            if cards != record.cards:
                msg = f"Undo expected {record.cards} on {record.to_location.value}, found {cards}"
                logger.error(msg)
                raise InvariantViolation(msg)
            if record.flipped_card is not None:
                top = source.inspect_top()
                if top != record.flipped_card:
                    msg = f"Undo expected {record.flipped_card} on {record.from_location.value}, found {top}"
                    logger.error(msg)
                    raise InvariantViolation(msg)
                top.flip(face_up=False)
            source.add_multiple_to_top(cards)
            if state.moves_since_last_cycle > 0:
                state.moves_since_last_cycle -= 1

        state.move_count -= 1
        logger.debug("Undid %s", record)
        self._after_change()
        return MoveOutcome(success=True, record=record)

    def auto_complete_step(self) -> MoveOutcome | None:
        """
        Send one card to a foundation. Returns None once there is nothing left to do.

        Callers animate by invoking this on their own schedule; the state is
        consistent after every step, so stopping early is always safe.
        """
        if not is_auto_completable(self.state):
            if self.is_won():
                return None
            return self._reject("Game is not ready for auto-complete")

        suggestion = find_auto_complete_move(self.state)
        if suggestion is None:
            msg = "Auto-complete found no foundation move in an auto-completable state"
            logger.error(msg)
            raise InvariantViolation(msg)

        outcome = self.attempt_move(CardRef(suggestion.from_location), suggestion.to_location)
        if not outcome.success:
            msg = f"Auto-complete move {suggestion} was rejected: {outcome.reason}"
            logger.error(msg)
            raise InvariantViolation(msg)
        return outcome

    def auto_complete(self) -> list[MoveOutcome]:
        """Run ``auto_complete_step`` to the end and return every step taken."""
        outcomes: list[MoveOutcome] = []
        for _ in range(self.config.auto_complete_step_limit):
            outcome = self.auto_complete_step()
            if outcome is None:
                return outcomes
            if not outcome.success:
                return outcomes
            outcomes.append(outcome)
        if self.is_auto_completable():
            msg = f"Auto-complete did not finish within {self.config.auto_complete_step_limit} steps"
            logger.error(msg)
            raise InvariantViolation(msg)
        return outcomes

    # -- queries --------------------------------------------------------

    def is_won(self) -> bool:
        return is_won(self.state)

    def is_stuck(self) -> bool:
        return is_stuck(self.state, self.config.stock_cycle_limit)

    def is_auto_completable(self) -> bool:
        return is_auto_completable(self.state)

    def check_invariants(self) -> None:
        check_invariants(self.state)

    def snapshot(self) -> Snapshot:
        return self.state.snapshot()

    @property
    def move_count(self) -> int:
        return self.state.move_count

    @property
    def history(self) -> list[MoveRecord]:
        return self.state.history

    def get_all_legal_actions(self) -> list[Action]:
        state = self.state
        suggestions: list[Action] = []

        if len(state.stock) > 0 or len(state.waste) > 0:
            suggestions.append(Action(Location.STOCK, Location.WASTE))

        sources: list[tuple[Location, Stack]] = [(Location.WASTE, state.waste)]
        sources.extend(zip(Location.tableaus(), state.tableaus))
        for location, pile in sources:
            top = pile.inspect_top()
            if top is None:
                continue
            if is_card_placable_on_foundation(top, state.foundations[top.suit], top.suit):
                suggestions.append(Action(location, Location.foundation(top.suit)))

        waste_top = state.waste.inspect_top()
        if waste_top is not None:
            for tableau_idx, tableau in enumerate(state.tableaus):
                if is_card_placable_on_tableau(waste_top, tableau):
                    suggestions.append(Action(Location.WASTE, Location.tableaus()[tableau_idx]))

        for tableau_idx, tableau in enumerate(state.tableaus):
            for idx in range(tableau.first_visible_index(), len(tableau)):
                card = tableau[idx]
                for other_tableau_idx, other_tableau in enumerate(state.tableaus):
                    if other_tableau_idx == tableau_idx:
                        continue
                    if is_card_placable_on_tableau(card, other_tableau):
                        suggestions.append(
                            Action(
                                Location.tableaus()[tableau_idx],
                                Location.tableaus()[other_tableau_idx],
                                change_index=idx,
                            ),
                        )

        for suit, foundation in state.foundations.items():
            foundation_top = foundation.inspect_top()
            if foundation_top is None:
                continue
            for tableau_idx, tableau in enumerate(state.tableaus):
                if is_card_placable_on_tableau(foundation_top, tableau):
                    suggestions.append(Action(Location.foundation(suit), Location.tableaus()[tableau_idx]))

        return suggestions

    def step(self, action: Action) -> MoveOutcome:
        """Apply an action from ``get_all_legal_actions``; anything else is a caller bug."""
        if action not in self.get_all_legal_actions():
            msg = f"Invalid action {action}"
            raise ValueError(msg)
        if action.from_location == Location.STOCK:
            return self.draw()
        return self.attempt_move(CardRef(action.from_location, action.change_index), action.to_location)

    def as_json(self) -> str:
        return json.dumps(self.state.as_jsonable_dict())

    def render(self) -> Render:
        return Render(
            state=self.status.value,
            stock=len(self.state.stock),
            waste=self.state.waste.inspect_top(),
            foundations=[self.state.foundations[suit].inspect_top() for suit in Suit],
            tableaus=[tableau.inspect_all_hidable() for tableau in self.state.tableaus],
            move_count=self.state.move_count,
            stock_cycles=self.state.stock_cycles,
        )

    # -- internals ------------------------------------------------------

    def _reject(self, reason: str) -> MoveOutcome:
        logger.debug("Rejected: %s", reason)
        return MoveOutcome.rejected(reason)

    def _resolve_destination(self, destination: Destination) -> Location | None:
        if isinstance(destination, Location):
            if destination.is_tableau or destination.is_foundation:
                return destination
            return None
        if isinstance(destination, Suit):
            return Location.foundation(destination)
        if isinstance(destination, int) and not isinstance(destination, bool):
            if 0 <= destination < len(Location.tableaus()):
                return Location.tableau(destination)
        return None

    def _reveal_source(self, source: Location) -> Card | None:
        pile = self.state.pile(source)
        if isinstance(pile, Tableau):
            return pile.reveal_top()
        return None

    def _record_move(self, record: MoveRecord) -> MoveOutcome:
        self.state.history.append(record)
        self.state.move_count += 1
        self.state.moves_since_last_cycle += 1
        logger.debug("Moved %s", record)
        self._after_change()
        flipped = record.flipped_card if not isinstance(record, DrawRecord) else None
        return MoveOutcome(success=True, record=record, flipped=flipped)

    def _move_to_foundation(self, source: Location, index: int, target: Location) -> MoveOutcome:
        source_pile = self.state.pile(source)
        if source.is_foundation:
            return self._reject("Cards do not move between foundations")
        if index != len(source_pile) - 1:
            return self._reject("Only a single top card can go to a foundation")
        card = source_pile[index]
        if not card.face_up:
            return self._reject(f"{card!r} is face down")
        foundation = self.state.pile(target)
        if not is_card_placable_on_foundation(card, foundation, target.suit):
            return self._reject(f"{card} cannot go on the {target.suit.value} foundation")

        source_pile.get_from_top()
        foundation.add_to_top(card)
        flipped = self._reveal_source(source)
        return self._record_move(ToFoundationRecord(source, target, card, flipped_card=flipped))

    def _move_to_tableau(self, source: Location, index: int, target: Location) -> MoveOutcome:
        source_pile = self.state.pile(source)
        if isinstance(source_pile, Tableau):
            run = movable_run(source_pile, index)
            if run is None:
                return self._reject(f"{source.value}[{index}] does not start a face-up run")
        else:
            run = [source_pile[index]]
        tableau = self.state.pile(target)
        if not is_card_placable_on_tableau(run[0], tableau):
            return self._reject(f"{run[0]} cannot go on {target.value}")

        cards = source_pile.get_multiple_from_top(len(run))
        tableau.add_multiple_to_top(cards)
        flipped = self._reveal_source(source)
        return self._record_move(ToTableauRecord(source, target, cards, flipped_card=flipped))
