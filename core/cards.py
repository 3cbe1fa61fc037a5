"""Card and Deck classes - immutable card representations."""

from dataclasses import dataclass, replace
from enum import Enum
from random import Random
from typing import Iterable, Iterator, Sequence

from core.errors import DeckExhaustedError


class Suit(Enum):
    """Card suits."""

    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"

    def __str__(self) -> str:
        return self.symbol

    @property
    def symbol(self) -> str:
        """Return the unicode suit symbol."""
        return {
            Suit.HEARTS: "♥",
            Suit.DIAMONDS: "♦",
            Suit.CLUBS: "♣",
            Suit.SPADES: "♠",
        }[self]

    @property
    def color(self) -> str:
        """Return 'red' or 'black'."""
        if self in (Suit.HEARTS, Suit.DIAMONDS):
            return "red"
        return "black"


class Rank(Enum):
    """Card ranks, valued by their label."""

    ACE = "A"
    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"

    def __str__(self) -> str:
        return self.value

    @property
    def order(self) -> int:
        """Return the position in the fixed total order A=1 .. K=13."""
        return _RANK_ORDER[self]

    @property
    def blackjack_value(self) -> int:
        """Return the blackjack point value (Ace = 11, face cards = 10)."""
        if self == Rank.ACE:
            return 11
        return min(self.order, 10)

    @property
    def is_ace(self) -> bool:
        """Check if this rank is an Ace."""
        return self == Rank.ACE


_RANK_ORDER = {rank: position for position, rank in enumerate(Rank, start=1)}


@dataclass(frozen=True, slots=True)
class Card:
    """
    Immutable playing card.

    Identity is the (suit, rank) pair. Whether the card is face up is the
    only thing that changes during play, and that is done by replacing the
    card with a flipped copy.
    """

    suit: Suit
    rank: Rank
    face_up: bool = False

    def __str__(self) -> str:
        return f"{self.rank}{self.suit}"

    def __repr__(self) -> str:
        state = "up" if self.face_up else "down"
        return f"Card({self.rank.name}, {self.suit.name}, {state})"

    @property
    def id(self) -> str:
        """Return the identifier unique within one deck, e.g. 'spades-A'."""
        return f"{self.suit.value}-{self.rank.value}"

    @property
    def color(self) -> str:
        """Return the suit colour."""
        return self.suit.color

    @property
    def value(self) -> int:
        """Return the blackjack point value."""
        return self.rank.blackjack_value

    @property
    def is_ace(self) -> bool:
        """Check if this card is an Ace."""
        return self.rank.is_ace

    def flipped(self, face_up: bool) -> "Card":
        """Return a copy of this card turned face up or face down."""
        if self.face_up == face_up:
            return self
        return replace(self, face_up=face_up)

    @classmethod
    def from_string(cls, s: str, face_up: bool = True) -> "Card":
        """Create a card from a string like '2♣', 'AS', 'Kh', '10d'."""
        s = s.strip().upper()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        rank_str = s[:-1]
        suit_str = s[-1]
        if rank_str == "T":
            rank_str = "10"

        suit_map = {
            "C": Suit.CLUBS,
            "♣": Suit.CLUBS,
            "D": Suit.DIAMONDS,
            "♦": Suit.DIAMONDS,
            "H": Suit.HEARTS,
            "♥": Suit.HEARTS,
            "S": Suit.SPADES,
            "♠": Suit.SPADES,
        }

        try:
            rank = Rank(rank_str)
        except ValueError:
            raise ValueError(f"Invalid rank: {rank_str}") from None
        if suit_str not in suit_map:
            raise ValueError(f"Invalid suit: {suit_str}")

        return cls(suit_map[suit_str], rank, face_up)


def create_deck() -> list[Card]:
    """Return the 52 cards, suit by suit in rank order, all face down."""
    return [Card(suit, rank) for suit in Suit for rank in Rank]


def shuffle_deck(deck: Sequence[Card], rng: Random | None = None) -> list[Card]:
    """
    Return a Fisher-Yates shuffled copy of a deck.

    Args:
        deck: Cards to shuffle (left untouched)
        rng: Random number generator for reproducible shuffles
    """
    rng = rng or Random()
    shuffled = list(deck)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def are_opposite_colors(card1: Card, card2: Card) -> bool:
    """Check if two cards are of opposite colours."""
    return card1.color != card2.color


def is_rank_one_less(card1: Card, card2: Card) -> bool:
    """Check if card1's rank is exactly one below card2's rank."""
    return card1.rank.order == card2.rank.order - 1


def is_rank_one_more(card1: Card, card2: Card) -> bool:
    """Check if card1's rank is exactly one above card2's rank."""
    return card1.rank.order == card2.rank.order + 1


class Deck:
    """
    A draw pile of cards.

    Index 0 is the top of the deck. A new deck without explicit cards is a
    freshly shuffled 52-card deck.
    """

    def __init__(
        self,
        cards: Iterable[Card] | None = None,
        rng: Random | None = None,
    ) -> None:
        """
        Initialize a deck.

        Args:
            cards: Cards in draw order (top first); shuffled 52 if omitted
            rng: Random number generator used for shuffles
        """
        self._rng = rng or Random()
        if cards is None:
            self._cards = shuffle_deck(create_deck(), self._rng)
        else:
            self._cards = list(cards)

    def reset(self) -> None:
        """Replace the contents with a freshly shuffled 52-card deck."""
        self._cards = shuffle_deck(create_deck(), self._rng)

    def draw(self, face_up: bool = True) -> Card:
        """Draw the top card, turned the requested way."""
        if not self._cards:
            raise DeckExhaustedError("Cannot draw from empty deck")
        return self._cards.pop(0).flipped(face_up)

    @property
    def cards(self) -> list[Card]:
        """Return a copy of the remaining cards, top first."""
        return list(self._cards)

    @property
    def cards_remaining(self) -> int:
        """Return the number of cards remaining."""
        return len(self._cards)

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards)
