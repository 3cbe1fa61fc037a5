"""Card games rules engine - 100% UI-agnostic."""

from core.cards import (
    Card,
    Deck,
    Rank,
    Suit,
    are_opposite_colors,
    create_deck,
    is_rank_one_less,
    is_rank_one_more,
    shuffle_deck,
)
from core.hand import Hand, Outcome, get_blackjack_value

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "are_opposite_colors",
    "create_deck",
    "is_rank_one_less",
    "is_rank_one_more",
    "shuffle_deck",
    "Hand",
    "Outcome",
    "get_blackjack_value",
]
