"""Hand evaluation for blackjack."""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Iterator

from core.cards import Card


def get_blackjack_value(cards: Iterable[Card]) -> int:
    """
    Calculate the best blackjack value of some cards.

    Aces start at 11 and are demoted to 1, one at a time, while the total is
    over 21. Face-down cards count like any other.
    """
    total = 0
    aces = 0

    for card in cards:
        if card.is_ace:
            aces += 1
        total += card.value

    # Reduce aces from 11 to 1 as needed
    while total > 21 and aces > 0:
        total -= 10
        aces -= 1

    return total


class Outcome(Enum):
    """Result of a finished blackjack round."""

    WIN = "win"
    LOSE = "lose"
    PUSH = "push"
    BLACKJACK = "blackjack"

    @property
    def is_win(self) -> bool:
        """Check if the round counts as won for statistics."""
        return self in (Outcome.WIN, Outcome.BLACKJACK)


@dataclass
class Hand:
    """A blackjack hand with value calculation."""

    cards: list[Card] = field(default_factory=list)

    def add_card(self, card: Card) -> None:
        """Add a card to the hand."""
        self.cards.append(card)

    def clear(self) -> None:
        """Remove all cards from the hand."""
        self.cards.clear()

    def reveal(self) -> None:
        """Turn every card face up."""
        self.cards = [card.flipped(True) for card in self.cards]

    @property
    def value(self) -> int:
        """Calculate the best hand value."""
        return get_blackjack_value(self.cards)

    @property
    def visible_value(self) -> int:
        """Value of the face-up cards only, as shown to the player."""
        return get_blackjack_value(card for card in self.cards if card.face_up)

    @property
    def is_soft(self) -> bool:
        """
        Check if the hand is soft (has an ace counted as 11).

        A hand is soft if it contains an ace that can be counted as 11
        without busting.
        """
        if not any(card.is_ace for card in self.cards):
            return False

        total_hard = sum(1 if card.is_ace else card.value for card in self.cards)
        return total_hard + 10 <= 21

    @property
    def is_blackjack(self) -> bool:
        """Check if the hand is a natural blackjack (21 with 2 cards)."""
        return len(self.cards) == 2 and self.value == 21

    @property
    def is_busted(self) -> bool:
        """Check if the hand has busted (value > 21)."""
        return self.value > 21

    def __len__(self) -> int:
        return len(self.cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __str__(self) -> str:
        cards_str = " ".join(str(card) if card.face_up else "??" for card in self.cards)
        value_str = f"({self.visible_value})"
        if self.is_blackjack and all(card.face_up for card in self.cards):
            value_str = "(BLACKJACK)"
        elif self.is_busted:
            value_str = "(BUST)"
        return f"{cards_str} {value_str}"

    def __repr__(self) -> str:
        return f"Hand({self.cards!r}, value={self.value})"


def evaluate_hands(player_hand: Hand, dealer_hand: Hand) -> Outcome:
    """
    Compare player and dealer hands once the dealer has finished.

    Naturals are settled before the dealer plays, so this only covers the
    regular comparison.
    """
    if player_hand.is_busted:
        return Outcome.LOSE

    if dealer_hand.is_busted:
        return Outcome.WIN

    player_value = player_hand.value
    dealer_value = dealer_hand.value
    if player_value > dealer_value:
        return Outcome.WIN
    if dealer_value > player_value:
        return Outcome.LOSE
    return Outcome.PUSH


def calculate_payout(outcome: Outcome, bet: int, blackjack_return: float = 2.5) -> int:
    """
    Return the chips handed back to the player for a settled bet.

    The bet has already been taken from the player, so a push returns the bet
    and a loss returns nothing.
    """
    if outcome == Outcome.BLACKJACK:
        return math.floor(bet * blackjack_return)
    if outcome == Outcome.WIN:
        return bet * 2
    if outcome == Outcome.PUSH:
        return bet
    return 0
