"""Blackjack game engine with state machine."""

import logging
import time
from random import Random
from typing import Callable

from transitions import Machine

from config import BlackjackConfig
from core.cards import Card, Deck
from core.game.dealer import DealerAction, DealerTurn, step_dealer
from core.game.events import EventEmitter, EventType, GameEvent
from core.game.state import BlackjackPhase
from core.hand import Hand, Outcome, calculate_payout, evaluate_hands
from core.progress.models import GameType
from core.progress.store import ProgressStore

logger = logging.getLogger(__name__)

OUTCOME_MESSAGES = {
    Outcome.BLACKJACK: "Blackjack! You win!",
    Outcome.WIN: "You win!",
    Outcome.LOSE: "Dealer wins!",
    Outcome.PUSH: "Push! It's a tie!",
}


class BlackjackGame:
    """
    Single-player blackjack against a dealer, using a state machine.

    This is the core game logic, completely UI-agnostic.
    Communication happens through events and return values only. The dealer
    turn is not played automatically: the caller advances it one step at a
    time with dealer_step(), or all at once with play_dealer().
    """

    # State machine states
    STATES = [p.value for p in BlackjackPhase]

    # State machine transitions
    TRANSITIONS = [
        {"trigger": "deal", "source": ["betting", "finished"], "dest": "playing"},
        {"trigger": "hand_over", "source": "playing", "dest": "dealer"},
        {"trigger": "settle", "source": ["playing", "dealer"], "dest": "finished"},
        {"trigger": "reset_table", "source": "*", "dest": "betting"},
    ]

    def __init__(
        self,
        settings: BlackjackConfig | None = None,
        progress: ProgressStore | None = None,
        deck: Deck | None = None,
        rng: Random | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize a new blackjack table.

        Args:
            settings: Table configuration (uses defaults if not provided)
            progress: Store that receives one result per finished round
            deck: Pre-arranged deck, top card first (shuffled if omitted)
            rng: Random number generator for reproducible games
            clock: Time source used to measure round duration
        """
        self.settings = settings or BlackjackConfig()
        self.progress = progress
        self._rng = rng or Random()
        self._clock = clock
        self.deck = deck if deck is not None else Deck(rng=self._rng)

        self.player_hand = Hand()
        self.dealer_hand = Hand()
        self.chips = self.settings.starting_chips
        self.table_bet = self.settings.default_bet
        self.bet = 0
        self.result: Outcome | None = None
        self.last_payout = 0
        self.can_double_down = False
        self.game_count = 0
        self.round_id = 0

        self._dealer_pending: DealerAction | None = None
        self._round_started_at = 0.0
        self._result_reported = False
        self.events = EventEmitter()

        # Initialize state machine
        self.machine = Machine(
            model=self,
            states=self.STATES,
            transitions=self.TRANSITIONS,
            initial="betting",
            auto_transitions=False,
            model_attribute="_machine_state",
        )

    @property
    def state(self) -> BlackjackPhase:
        """Get current phase as enum."""
        return BlackjackPhase(self._machine_state)  # type: ignore[attr-defined]

    def subscribe(
        self,
        handler: Callable[[GameEvent], None],
        event_type: EventType | None = None,
    ) -> None:
        """Subscribe to game events."""
        self.events.subscribe(handler, event_type)

    def change_bet(self, delta: int) -> int:
        """
        Adjust the stake used for the next round.

        The stake is kept between the table minimum and the chips available.

        Returns:
            The new table bet
        """
        if self.state in (BlackjackPhase.PLAYING, BlackjackPhase.DEALER):
            self.events.emit_new(EventType.INVALID_ACTION, message="Cannot change bet during a round")
            return self.table_bet

        self.table_bet = max(self.settings.min_bet, min(self.chips, self.table_bet + delta))
        self.events.emit_new(EventType.BET_CHANGED, amount=self.table_bet)
        return self.table_bet

    def start_round(self, bet: int | None = None) -> bool:
        """
        Take a bet and deal a new round.

        Args:
            bet: Stake for this round (defaults to the table bet)

        Returns:
            True if the round was dealt, False if the bet was declined
        """
        if self.state not in (BlackjackPhase.BETTING, BlackjackPhase.FINISHED):
            self.events.emit_new(
                EventType.INVALID_ACTION,
                message="Cannot bet in current state",
                state=self.state.name,
            )
            return False

        amount = self.table_bet if bet is None else bet
        if amount < 1:
            self.events.emit_new(EventType.INVALID_ACTION, message="Bet must be positive")
            return False

        if amount > self.chips:
            self.events.emit_new(
                EventType.INSUFFICIENT_FUNDS,
                required=amount,
                available=self.chips,
            )
            return False

        if self.deck.cards_remaining < self.settings.reshuffle_threshold:
            self.deck.reset()
            self.events.emit_new(EventType.DECK_RESHUFFLED, reason="low")

        self.chips -= amount
        self.bet = amount
        self.table_bet = amount
        self.player_hand.clear()
        self.dealer_hand.clear()
        self.result = None
        self.last_payout = 0
        self._dealer_pending = None
        self._result_reported = False
        self.round_id += 1
        self.game_count += 1
        self._round_started_at = self._clock()

        self.events.emit_new(EventType.BET_PLACED, amount=amount, chips=self.chips)

        # Deal: player, player, dealer, dealer (face down)
        self._deal_card_to_hand(self.player_hand)
        self._deal_card_to_hand(self.player_hand)
        self._deal_card_to_hand(self.dealer_hand)
        self._deal_card_to_hand(self.dealer_hand, face_up=False)

        self.can_double_down = True
        self.deal()  # Trigger state transition
        self.events.emit_new(EventType.ROUND_STARTED, round_id=self.round_id)
        logger.debug("Round %d dealt: player %s, dealer %s", self.round_id, self.player_hand, self.dealer_hand)

        self._check_player_hand()
        return True

    def _draw(self, face_up: bool = True) -> Card:
        """Draw a card, starting a fresh deck if this one ran dry mid-hand."""
        if not self.deck.cards_remaining:
            self.deck.reset()
            self.events.emit_new(EventType.DECK_RESHUFFLED, reason="empty")
        return self.deck.draw(face_up)

    def _deal_card_to_hand(self, hand: Hand, face_up: bool = True) -> Card:
        """Deal a card to a hand."""
        card = self._draw(face_up)
        hand.add_card(card)
        self.events.emit_new(
            EventType.CARD_DEALT,
            card=str(card) if face_up else "??",
            hand="dealer" if hand is self.dealer_hand else "player",
            hand_value=hand.visible_value,
        )
        return card

    def _check_player_hand(self) -> None:
        """Settle the round straight away on a bust or a natural."""
        if self.state != BlackjackPhase.PLAYING:
            return

        if self.player_hand.is_busted:
            self.events.emit_new(EventType.PLAYER_BUSTS, hand_value=self.player_hand.value)
            self._finish(Outcome.LOSE)
        elif self.player_hand.is_blackjack:
            if self.dealer_hand.is_blackjack:
                self._finish(Outcome.PUSH)
            else:
                self.events.emit_new(EventType.PLAYER_BLACKJACK)
                self._finish(Outcome.BLACKJACK)

    def hit(self) -> bool:
        """Player hits (takes another card)."""
        if self.state != BlackjackPhase.PLAYING:
            self.events.emit_new(EventType.INVALID_ACTION, message="Cannot hit now")
            return False

        self._deal_card_to_hand(self.player_hand)
        self.can_double_down = False
        self.events.emit_new(EventType.PLAYER_HIT, hand_value=self.player_hand.value)

        self._check_player_hand()
        return True

    def stand(self) -> bool:
        """Player stands; the dealer turn begins."""
        if self.state != BlackjackPhase.PLAYING:
            self.events.emit_new(EventType.INVALID_ACTION, message="Cannot stand now")
            return False

        self.events.emit_new(EventType.PLAYER_STAND, hand_value=self.player_hand.value)
        self._begin_dealer_turn()
        return True

    def double_down(self) -> bool:
        """Player doubles the bet, takes exactly one card and stands."""
        if not self.can_double_down or self.state != BlackjackPhase.PLAYING or len(self.player_hand) != 2:
            self.events.emit_new(EventType.INVALID_ACTION, message="Cannot double")
            return False

        if self.bet > self.chips:
            self.events.emit_new(
                EventType.INSUFFICIENT_FUNDS,
                required=self.bet,
                available=self.chips,
            )
            return False

        self.chips -= self.bet
        self.bet *= 2

        self._deal_card_to_hand(self.player_hand)
        self.events.emit_new(
            EventType.PLAYER_DOUBLE,
            hand_value=self.player_hand.value,
            new_bet=self.bet,
        )

        if self.player_hand.is_busted:
            self.events.emit_new(EventType.PLAYER_BUSTS, hand_value=self.player_hand.value)

        self._begin_dealer_turn()
        return True

    def _begin_dealer_turn(self) -> None:
        self.can_double_down = False
        self._dealer_pending = DealerAction.REVEAL
        self.hand_over()

    def dealer_step(self, round_id: int | None = None) -> DealerAction | None:
        """
        Advance the dealer turn by one step.

        Each call reads the current table, so a scheduler may call this from
        a timer. Calls made for another round, or outside the dealer phase,
        do nothing.

        Args:
            round_id: Round the caller scheduled this step for

        Returns:
            The action the next step will take, or None when the round is over
        """
        if self.state != BlackjackPhase.DEALER:
            return None
        if round_id is not None and round_id != self.round_id:
            logger.debug("Ignoring dealer step for stale round %d (current %d)", round_id, self.round_id)
            return None

        pending = self._dealer_pending or DealerAction.REVEAL
        if pending.is_final:
            self._finish(evaluate_hands(self.player_hand, self.dealer_hand))
            return None

        if pending == DealerAction.HIT and not self.deck.cards_remaining:
            self.deck.reset()
            self.events.emit_new(EventType.DECK_RESHUFFLED, reason="empty")

        turn = DealerTurn(
            hand=tuple(self.dealer_hand.cards),
            deck=tuple(self.deck.cards),
            pending=pending,
        )
        turn, next_action = step_dealer(turn, self.settings.dealer_stands_on)
        self.dealer_hand.cards = list(turn.hand)
        self.deck = Deck(turn.deck, rng=self._rng)
        self._dealer_pending = next_action

        if pending == DealerAction.REVEAL:
            self.events.emit_new(
                EventType.DEALER_REVEALS,
                card=str(self.dealer_hand.cards[-1]),
                hand_value=self.dealer_hand.value,
            )
        else:
            self.events.emit_new(
                EventType.DEALER_HITS,
                card=str(self.dealer_hand.cards[-1]),
                hand_value=self.dealer_hand.value,
            )

        if next_action == DealerAction.BUST:
            self.events.emit_new(EventType.DEALER_BUSTS, hand_value=self.dealer_hand.value)
        elif next_action == DealerAction.STAND:
            self.events.emit_new(EventType.DEALER_STANDS, hand_value=self.dealer_hand.value)

        return next_action

    def play_dealer(self) -> Outcome | None:
        """Run the dealer turn to completion and return the outcome."""
        round_id = self.round_id
        while self.dealer_step(round_id) is not None:
            pass
        return self.result

    def _finish(self, outcome: Outcome) -> None:
        """Pay out, end the round and report it."""
        self.dealer_hand.reveal()
        payout = calculate_payout(outcome, self.bet, self.settings.blackjack_return)
        self.chips += payout
        self.last_payout = payout
        self.result = outcome
        self._dealer_pending = None
        self.settle()

        if outcome.is_win:
            self.events.emit_new(EventType.PLAYER_WINS, amount=payout - self.bet)
        elif outcome == Outcome.PUSH:
            self.events.emit_new(EventType.PUSH)
        else:
            self.events.emit_new(EventType.PLAYER_LOSES, amount=self.bet)

        self.events.emit_new(
            EventType.ROUND_ENDED,
            round_id=self.round_id,
            outcome=outcome.value,
            message=self.result_message,
            description=self.result_description,
            payout=payout,
            chips=self.chips,
        )
        logger.info("Round %d finished: %s (bet %d, payout %d)", self.round_id, outcome.value, self.bet, payout)
        self._report_result(outcome)

    def _report_result(self, outcome: Outcome) -> None:
        if self._result_reported or self.progress is None:
            return
        self._result_reported = True
        elapsed = max(0, int(self._clock() - self._round_started_at))
        self.progress.end_game(GameType.BLACKJACK, outcome.is_win, elapsed)

    def new_game(self) -> None:
        """Reset the table: starting chips, fresh deck, no round in progress."""
        self.deck.reset()
        self.player_hand.clear()
        self.dealer_hand.clear()
        self.chips = self.settings.starting_chips
        self.table_bet = self.settings.default_bet
        self.bet = 0
        self.result = None
        self.last_payout = 0
        self.can_double_down = False
        self.game_count = 0
        # Invalidates dealer steps still scheduled for the old round
        self.round_id += 1
        self._dealer_pending = None
        self._result_reported = False
        self.reset_table()
        self.events.emit_new(EventType.GAME_STARTED, game="blackjack")

    @property
    def net_result(self) -> int:
        """Chip gain or loss of the finished round."""
        if self.result is None:
            return 0
        return self.last_payout - self.bet

    @property
    def result_message(self) -> str | None:
        """Headline for the notification layer."""
        if self.result is None:
            return None
        return OUTCOME_MESSAGES[self.result]

    @property
    def result_description(self) -> str | None:
        """Chip delta line for the notification layer."""
        if self.result is None:
            return None
        if self.result == Outcome.LOSE:
            return f"Lost ${self.bet}"
        return f"Won ${self.net_result}"

    @property
    def can_hit(self) -> bool:
        """Check if hitting is allowed."""
        return self.state == BlackjackPhase.PLAYING

    @property
    def can_stand(self) -> bool:
        """Check if standing is allowed."""
        return self.state == BlackjackPhase.PLAYING

    @property
    def can_double(self) -> bool:
        """Check if doubling is allowed."""
        return (
            self.state == BlackjackPhase.PLAYING
            and self.can_double_down
            and len(self.player_hand) == 2
            and self.bet <= self.chips
        )
