"""Exceptions raised by the rules engines."""


class CardGameError(Exception):
    """Base class for engine errors."""


class DeckExhaustedError(CardGameError, IndexError):
    """A draw was attempted on an empty deck."""


class InvariantViolation(CardGameError):
    """
    Engine state broke a structural invariant.

    Raised when the cards on the table no longer add up to one full deck.
    This always means a bug; callers should not try to recover from it.
    """
