"""Klondike placement rules."""

from typing import Sequence

from core.cards import Card, Rank, are_opposite_colors, is_rank_one_less, is_rank_one_more


def is_valid_solitaire_sequence(cards: Sequence[Card]) -> bool:
    """
    Check if cards form a movable run.

    Each card must be one rank below the card before it and of the opposite
    colour. Empty and single-card runs are valid.
    """
    for current, following in zip(cards, cards[1:]):
        if not are_opposite_colors(current, following) or not is_rank_one_less(following, current):
            return False
    return True


def can_place_on_foundation(card: Card, foundation: Sequence[Card]) -> bool:
    """Check if a card may go onto a foundation pile (A to K, one suit)."""
    if not foundation:
        return card.rank == Rank.ACE

    top_card = foundation[-1]
    return card.suit == top_card.suit and is_rank_one_more(card, top_card)


def can_place_on_tableau(card: Card, column: Sequence[Card]) -> bool:
    """
    Check if a run whose bottom card is `card` may go onto a tableau column.

    Only a King may start an empty column.
    """
    if not column:
        return card.rank == Rank.KING

    top_card = column[-1]
    return top_card.face_up and are_opposite_colors(card, top_card) and is_rank_one_less(card, top_card)
