"""Builders shared by the test modules."""

from hypothesis import strategies as st

from core.cards import Card, Deck, Rank, Suit, create_deck
from core.hand import Hand


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def stacked_deck(*cards: str) -> Deck:
    """
    A deck whose top cards are the given ones, e.g. stacked_deck("AS", "10H").

    The remaining cards of a full deck follow in creation order.
    """
    top = [Card.from_string(c, face_up=False) for c in cards]
    top_ids = {card.id for card in top}
    rest = [card for card in create_deck() if card.id not in top_ids]
    return Deck(top + rest)


def hand_of(*cards: str) -> Hand:
    """A face-up hand built from card strings."""
    return Hand([Card.from_string(c) for c in cards])


# Hypothesis strategies for property-based testing
@st.composite
def card_strategy(draw):
    """Generate a random face-up card."""
    rank = draw(st.sampled_from(list(Rank)))
    suit = draw(st.sampled_from(list(Suit)))
    return Card(suit, rank, face_up=True)


@st.composite
def hand_strategy(draw, min_cards=2, max_cards=5):
    """Generate a random hand."""
    cards = draw(st.lists(card_strategy(), min_size=min_cards, max_size=max_cards))
    return Hand(cards)
