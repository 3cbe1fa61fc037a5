"""Klondike solitaire engine."""

from core.solitaire.piles import PileKind, PileRef
from core.solitaire.rules import can_place_on_foundation, can_place_on_tableau, is_valid_solitaire_sequence
from core.solitaire.engine import Selection, SolitaireGame

__all__ = [
    "PileKind",
    "PileRef",
    "can_place_on_foundation",
    "can_place_on_tableau",
    "is_valid_solitaire_sequence",
    "Selection",
    "SolitaireGame",
]
