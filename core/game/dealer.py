"""Dealer turn as a stepped state machine."""

from dataclasses import dataclass, replace
from enum import Enum

from core.cards import Card
from core.errors import DeckExhaustedError
from core.hand import get_blackjack_value

DEALER_STANDS_ON = 17


class DealerAction(Enum):
    """The next thing the dealer will do."""

    REVEAL = "reveal"
    HIT = "hit"
    STAND = "stand"
    BUST = "bust"

    @property
    def is_final(self) -> bool:
        """Check if the dealer is done drawing."""
        return self in (DealerAction.STAND, DealerAction.BUST)


@dataclass(frozen=True)
class DealerTurn:
    """Snapshot of everything one dealer step reads and writes."""

    hand: tuple[Card, ...]
    deck: tuple[Card, ...]
    pending: DealerAction = DealerAction.REVEAL


def dealer_policy(cards: tuple[Card, ...], stands_on: int = DEALER_STANDS_ON) -> DealerAction:
    """
    Decide the dealer's next action from the hand value alone.

    A soft 17 is treated like any other 17.
    """
    value = get_blackjack_value(cards)
    if value > 21:
        return DealerAction.BUST
    if value < stands_on:
        return DealerAction.HIT
    return DealerAction.STAND


def step_dealer(
    turn: DealerTurn,
    stands_on: int = DEALER_STANDS_ON,
) -> tuple[DealerTurn, DealerAction | None]:
    """
    Perform the pending dealer action.

    Returns the new turn and the action that will follow, or None once the
    dealer has nothing left to do.
    """
    if turn.pending == DealerAction.REVEAL:
        hand = tuple(card.flipped(True) for card in turn.hand)
    elif turn.pending == DealerAction.HIT:
        if not turn.deck:
            raise DeckExhaustedError("Dealer cannot draw from an empty deck")
        hand = turn.hand + (turn.deck[0].flipped(True),)
        turn = replace(turn, deck=turn.deck[1:])
    else:
        return turn, None

    next_action = dealer_policy(hand, stands_on)
    return replace(turn, hand=hand, pending=next_action), next_action
