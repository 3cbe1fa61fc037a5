"""Blackjack phase enumeration."""

from enum import Enum


class BlackjackPhase(Enum):
    """
    Blackjack round phases.

    Flow: BETTING → PLAYING → DEALER → FINISHED → PLAYING (next round).
    The allowed changes are BlackjackGame.TRANSITIONS.
    """

    # Waiting for the first bet of a table
    BETTING = "betting"

    # Player decides: hit, stand or double
    PLAYING = "playing"

    # Dealer reveals and draws; player input is ignored
    DEALER = "dealer"

    # Round settled, ready for the next bet
    FINISHED = "finished"

    def __str__(self) -> str:
        return self.value.title()
