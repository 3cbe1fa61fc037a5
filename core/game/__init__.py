"""Blackjack engine and the shared event system."""

from core.game.events import GameEvent, EventEmitter, EventType
from core.game.state import BlackjackPhase
from core.game.dealer import DealerAction, DealerTurn, dealer_policy, step_dealer
from core.game.engine import BlackjackGame, OUTCOME_MESSAGES

__all__ = [
    "GameEvent",
    "EventEmitter",
    "EventType",
    "BlackjackPhase",
    "DealerAction",
    "DealerTurn",
    "dealer_policy",
    "step_dealer",
    "BlackjackGame",
    "OUTCOME_MESSAGES",
]
