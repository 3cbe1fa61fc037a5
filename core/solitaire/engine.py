"""Klondike (draw three) solitaire engine."""

import logging
import time
from dataclasses import dataclass
from random import Random
from typing import Callable

from config import SolitaireConfig
from core.cards import Card, create_deck, shuffle_deck
from core.errors import InvariantViolation
from core.game.events import EventEmitter, EventType, GameEvent
from core.progress.models import GameType
from core.progress.store import ProgressStore
from core.solitaire.piles import FOUNDATION_COUNT, TABLEAU_COUNT, PileKind, PileRef
from core.solitaire.rules import can_place_on_foundation, can_place_on_tableau, is_valid_solitaire_sequence

logger = logging.getLogger(__name__)

DECK_SIZE = 52


@dataclass(frozen=True)
class Selection:
    """Cards picked up by the player, bottom card first."""

    source: PileRef
    cards: tuple[Card, ...]
    start_index: int


class SolitaireGame:
    """
    Klondike solitaire table.

    Every pile is a list whose last element is the top card. Commands return
    False when the move is not allowed and leave the table untouched.
    """

    def __init__(
        self,
        settings: SolitaireConfig | None = None,
        progress: ProgressStore | None = None,
        rng: Random | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize and deal a new game.

        Args:
            settings: Draw count and scoring (uses defaults if not provided)
            progress: Store that receives the win
            rng: Random number generator for reproducible deals
            clock: Wall-clock source, in seconds
        """
        self.settings = settings or SolitaireConfig()
        self.progress = progress
        self._rng = rng or Random()
        self._clock = clock
        self.events = EventEmitter()

        self.stock: list[Card] = []
        self.waste: list[Card] = []
        self.foundations: list[list[Card]] = [[] for _ in range(FOUNDATION_COUNT)]
        self.tableau: list[list[Card]] = [[] for _ in range(TABLEAU_COUNT)]
        self.selection: Selection | None = None
        self.moves = 0
        self.score = 0
        self.won = False
        self.start_time = 0.0
        self.round_id = 0
        self._final_time: int | None = None
        self._result_reported = False

        self.deal()

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    def deal(self) -> None:
        """Shuffle a fresh deck and lay out a new game."""
        deck = shuffle_deck(create_deck(), self._rng)

        self.tableau = [[] for _ in range(TABLEAU_COUNT)]
        position = 0
        for column in range(TABLEAU_COUNT):
            for row in range(column + 1):
                # Only the last card of each column is face up
                self.tableau[column].append(deck[position].flipped(row == column))
                position += 1

        self.stock = [card.flipped(False) for card in deck[position:]]
        self.waste = []
        self.foundations = [[] for _ in range(FOUNDATION_COUNT)]
        self.selection = None
        self.moves = 0
        self.score = 0
        self.won = False
        self._final_time = None
        self._result_reported = False
        self.start_time = self._clock()
        self.round_id += 1

        self._check_conservation()
        self.events.emit_new(EventType.GAME_STARTED, game="solitaire", round_id=self.round_id)

    def draw_stock(self) -> bool:
        """
        Turn cards from the stock onto the waste.

        With an empty stock the waste is turned over to become the stock.
        """
        if not self.stock and not self.waste:
            return False

        self.selection = None
        if not self.stock:
            self.stock = [card.flipped(False) for card in reversed(self.waste)]
            self.waste = []
            self.moves += 1
            self.events.emit_new(EventType.WASTE_RECYCLED, stock=len(self.stock))
        else:
            count = min(self.settings.draw_count, len(self.stock))
            drawn = [card.flipped(True) for card in self.stock[-count:]]
            del self.stock[-count:]
            self.waste.extend(drawn)
            self.moves += 1
            self.events.emit_new(EventType.STOCK_DRAWN, cards=[str(c) for c in drawn])

        self._check_conservation()
        return True

    def select(self, pile: PileRef, card_index: int | None = None) -> bool:
        """
        Pick up cards.

        A tableau card selects itself and every card above it, provided they
        form a valid run. Only the top waste card can be picked up. Selecting
        the single selected card again puts it down.

        Args:
            pile: Pile clicked
            card_index: Position in the pile (defaults to the top card)

        Returns:
            True if the selection changed
        """
        if pile.kind == PileKind.WASTE:
            cards = self.waste
        elif pile.kind == PileKind.TABLEAU:
            cards = self.tableau[pile.index]
        else:
            return False

        index = len(cards) - 1 if card_index is None else card_index
        if not 0 <= index < len(cards):
            return False
        card = cards[index]

        if self.selection is not None and len(self.selection.cards) == 1 and self.selection.cards[0].id == card.id:
            self.clear_selection()
            return True

        if not card.face_up:
            return False
        if pile.kind == PileKind.WASTE and index != len(cards) - 1:
            return False

        run = tuple(cards[index:])
        if not is_valid_solitaire_sequence(run):
            return False

        self.selection = Selection(source=pile, cards=run, start_index=index)
        self.events.emit_new(EventType.CARDS_SELECTED, source=str(pile), cards=[str(c) for c in run])
        return True

    def clear_selection(self) -> None:
        """Put the selected cards down."""
        if self.selection is not None:
            self.selection = None
            self.events.emit_new(EventType.SELECTION_CLEARED)

    def move(self, target: PileRef) -> bool:
        """Move the selection onto a foundation or tableau pile."""
        if target.kind == PileKind.FOUNDATION:
            return self.move_to_foundation(target.index)
        if target.kind == PileKind.TABLEAU:
            return self.move_to_tableau(target.index)
        return False

    def move_to_foundation(self, index: int) -> bool:
        """Move the single selected card onto a foundation."""
        target = PileRef.foundation(index)
        selection = self.selection
        if selection is None or len(selection.cards) != 1:
            return False

        card = selection.cards[0]
        foundation = self.foundations[target.index]
        if not can_place_on_foundation(card, foundation):
            return False

        self._take(selection)
        foundation.append(card)
        self.moves += 1
        self.score += self.settings.foundation_points
        self.selection = None
        self.events.emit_new(EventType.MOVED_TO_FOUNDATION, card=str(card), foundation=index, score=self.score)

        self._check_conservation()
        self._check_win()
        return True

    def move_to_tableau(self, index: int) -> bool:
        """Move the selected run onto a tableau column."""
        target = PileRef.tableau(index)
        selection = self.selection
        if selection is None or selection.source == target:
            return False

        column = self.tableau[target.index]
        if not can_place_on_tableau(selection.cards[0], column):
            return False

        self._take(selection)
        column.extend(selection.cards)
        self.moves += 1
        self.score += self.settings.tableau_points
        self.selection = None
        self.events.emit_new(
            EventType.MOVED_TO_TABLEAU,
            cards=[str(c) for c in selection.cards],
            column=index,
            score=self.score,
        )

        self._check_conservation()
        return True

    def _take(self, selection: Selection) -> None:
        """Remove the selected cards from their pile and expose the card beneath."""
        source = self.waste if selection.source.kind == PileKind.WASTE else self.tableau[selection.source.index]
        picked = source[selection.start_index:]
        if [c.id for c in picked] != [c.id for c in selection.cards]:
            raise InvariantViolation(f"Selection no longer matches {selection.source}")

        del source[selection.start_index:]
        if selection.source.kind == PileKind.TABLEAU and source and not source[-1].face_up:
            source[-1] = source[-1].flipped(True)
            self.events.emit_new(EventType.CARD_REVEALED, card=str(source[-1]), column=selection.source.index)

    def _all_cards(self) -> list[Card]:
        cards = self.stock + self.waste
        for pile in self.foundations + self.tableau:
            cards.extend(pile)
        return cards

    def _check_conservation(self) -> None:
        """Raise if the table does not hold exactly one full deck."""
        ids = [card.id for card in self._all_cards()]
        if len(ids) != DECK_SIZE or len(set(ids)) != DECK_SIZE:
            raise InvariantViolation(f"Table holds {len(ids)} cards ({len(set(ids))} distinct)")

    @property
    def card_count(self) -> int:
        """Return the number of cards on the table."""
        return len(self._all_cards())

    @property
    def foundation_count(self) -> int:
        """Return the number of cards on the foundations."""
        return sum(len(pile) for pile in self.foundations)

    def elapsed_seconds(self) -> int:
        """Seconds since the deal, frozen once the game is won."""
        if self._final_time is not None:
            return self._final_time
        return max(0, int(self._clock() - self.start_time))

    def _check_win(self) -> None:
        if self.won or self.foundation_count != DECK_SIZE:
            return

        self.won = True
        self._final_time = self.elapsed_seconds()
        self.events.emit_new(EventType.GAME_WON, time=self._final_time, score=self.score, moves=self.moves)
        logger.info("Solitaire won in %ds with %d moves", self._final_time, self.moves)

        if self.progress is not None and not self._result_reported:
            self._result_reported = True
            self.progress.end_game(GameType.SOLITAIRE, True, self._final_time)
