"""Pydantic schemas for API requests and responses."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from core.cards import Card
from core.progress.models import GameType


class CardResponse(BaseModel):
    """Card representation; face-down cards keep their identity hidden."""

    id: str | None
    suit: str | None
    rank: str | None
    color: str | None
    face_up: bool

    @classmethod
    def from_card(cls, card: Card) -> "CardResponse":
        """Convert a Card, hiding face-down cards."""
        if not card.face_up:
            return cls(id=None, suit=None, rank=None, color=None, face_up=False)
        return cls(id=card.id, suit=card.suit.value, rank=card.rank.value, color=card.color, face_up=True)


class SessionResponse(BaseModel):
    """Newly created or reused session."""

    session_id: str


# Blackjack schemas
class BetRequest(BaseModel):
    """Request to start a round."""

    amount: int | None = Field(default=None, ge=1, description="Bet amount, table bet if omitted")


class BetChangeRequest(BaseModel):
    """Request to raise or lower the table bet."""

    delta: int


class ActionRequest(BaseModel):
    """Request for player action."""

    action: Literal["hit", "stand", "double"]


class DealerStepRequest(BaseModel):
    """Request to advance the dealer by one step."""

    round_id: int | None = None


class HandResponse(BaseModel):
    """Hand representation."""

    cards: list[CardResponse]
    value: int
    is_busted: bool


class BlackjackStateResponse(BaseModel):
    """Current blackjack table."""

    phase: str
    round_id: int
    player_hand: HandResponse
    dealer_hand: HandResponse
    chips: int
    bet: int
    table_bet: int
    result: Literal["win", "lose", "push", "blackjack"] | None
    result_message: str | None
    result_description: str | None
    net_result: int
    can_hit: bool
    can_stand: bool
    can_double: bool
    dealer_next_action: str | None = None


# Solitaire schemas
class PileRequest(BaseModel):
    """A pile on the solitaire table."""

    kind: Literal["stock", "waste", "foundation", "tableau"]
    index: int = Field(default=0, ge=0)


class SelectRequest(BaseModel):
    """Request to pick up cards."""

    pile: PileRequest
    card_index: int | None = Field(default=None, ge=0)


class MoveRequest(BaseModel):
    """Request to put the selection onto a pile."""

    target: PileRequest


class SelectionResponse(BaseModel):
    """Cards currently picked up."""

    source: str
    cards: list[CardResponse]


class SolitaireStateResponse(BaseModel):
    """Current solitaire table."""

    round_id: int
    stock_count: int
    waste: list[CardResponse]
    foundations: list[list[CardResponse]]
    tableau: list[list[CardResponse]]
    selection: SelectionResponse | None
    moves: int
    score: int
    won: bool
    elapsed_seconds: int


# Progress schemas
class StartGameRequest(BaseModel):
    """Request to mark a game as being played."""

    game_type: GameType


class SettingsUpdateRequest(BaseModel):
    """Partial settings update; omitted or null fields keep their value."""

    model_config = ConfigDict(extra="forbid")

    sound_enabled: bool | None = None
    animations_enabled: bool | None = None
    auto_complete_enabled: bool | None = None
    difficulty: Literal["easy", "medium", "hard"] | None = None
    card_back: str | None = None
    theme: Literal["light", "dark", "system"] | None = None
