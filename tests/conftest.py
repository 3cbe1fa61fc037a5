"""Pytest fixtures for card game tests."""

import pytest
from random import Random

from core.hand import Hand
from core.game import BlackjackGame
from core.progress import InMemoryBlobStore, ProgressStore
from core.solitaire import SolitaireGame
from tests.helpers import FakeClock, hand_of


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def clock():
    """A clock that only moves when told to."""
    return FakeClock()


@pytest.fixture
def blob_store():
    """An empty in-memory blob store."""
    return InMemoryBlobStore()


@pytest.fixture
def progress(blob_store):
    """A progress store backed by memory."""
    return ProgressStore(storage=blob_store)


@pytest.fixture
def empty_hand():
    """An empty hand."""
    return Hand()


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return hand_of("AS", "KH")


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return hand_of("AS", "6H")


@pytest.fixture
def bust_hand():
    """A busted hand."""
    return hand_of("10S", "6H", "KC")


@pytest.fixture
def game(rng, progress, clock):
    """A blackjack table with a shuffled deck."""
    return BlackjackGame(progress=progress, rng=rng, clock=clock)


@pytest.fixture
def solitaire(rng, progress, clock):
    """A freshly dealt solitaire game."""
    return SolitaireGame(progress=progress, rng=rng, clock=clock)
