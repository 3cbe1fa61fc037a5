"""Solitaire API endpoints."""

import time
from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException

from api.dependencies import get_progress_store
from api.schemas import (
    CardResponse,
    MoveRequest,
    PileRequest,
    SelectionResponse,
    SelectRequest,
    SessionResponse,
    SolitaireStateResponse,
)
from api.session import drop_expired_games, ensure_session, require_session, touch_session
from config import config
from core.progress import GameType, ProgressStore
from core.solitaire import PileKind, PileRef, SolitaireGame

router = APIRouter()

# Live games, keyed by session token
_games: dict[str, SolitaireGame] = {}


def _pile_ref(request: PileRequest) -> PileRef:
    try:
        return PileRef(PileKind(request.kind), request.index)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


def _game_state_response(game: SolitaireGame) -> SolitaireStateResponse:
    """Convert game state to response."""
    selection = None
    if game.selection is not None:
        selection = SelectionResponse(
            source=str(game.selection.source),
            cards=[CardResponse.from_card(c) for c in game.selection.cards],
        )

    return SolitaireStateResponse(
        round_id=game.round_id,
        stock_count=len(game.stock),
        waste=[CardResponse.from_card(c) for c in game.waste],
        foundations=[[CardResponse.from_card(c) for c in pile] for pile in game.foundations],
        tableau=[[CardResponse.from_card(c) for c in column] for column in game.tableau],
        selection=selection,
        moves=game.moves,
        score=game.score,
        won=game.won,
        elapsed_seconds=game.elapsed_seconds(),
    )


def _get_game(session_id: str) -> SolitaireGame:
    """Get the solitaire game of a session."""
    game = _games.get(session_id)
    if game is None:
        raise HTTPException(status_code=404, detail="No solitaire game for this session")
    return game


@router.post("/new")
async def new_game(
    progress: Annotated[ProgressStore, Depends(get_progress_store)],
    session_id: Annotated[str | None, Header(alias="X-Session-ID")] = None,
) -> SessionResponse:
    """Deal a new game, creating a session if needed."""
    session_id = await ensure_session(session_id)
    await drop_expired_games(_games)

    _games[session_id] = SolitaireGame(settings=config.solitaire, progress=progress)
    progress.start_game(GameType.SOLITAIRE)
    await touch_session(session_id, last_activity=int(time.time()))
    return SessionResponse(session_id=session_id)


@router.get("/state")
async def get_state(
    session_id: Annotated[str, Depends(require_session)],
) -> SolitaireStateResponse:
    """Get current table state."""
    return _game_state_response(_get_game(session_id))


@router.post("/stock")
async def draw_stock(
    session_id: Annotated[str, Depends(require_session)],
) -> SolitaireStateResponse:
    """Turn cards from the stock, or recycle the waste when the stock is empty."""
    game = _get_game(session_id)
    if not game.draw_stock():
        raise HTTPException(status_code=400, detail="Stock and waste are empty")
    return _game_state_response(game)


@router.post("/select")
async def select_cards(
    request: SelectRequest,
    session_id: Annotated[str, Depends(require_session)],
) -> SolitaireStateResponse:
    """Pick up a card and the cards above it."""
    game = _get_game(session_id)
    if not game.select(_pile_ref(request.pile), request.card_index):
        raise HTTPException(status_code=400, detail="Cannot select those cards")
    return _game_state_response(game)


@router.post("/move")
async def move_selection(
    request: MoveRequest,
    session_id: Annotated[str, Depends(require_session)],
) -> SolitaireStateResponse:
    """Put the selected cards onto a foundation or tableau column."""
    game = _get_game(session_id)
    if not game.move(_pile_ref(request.target)):
        raise HTTPException(status_code=400, detail="Illegal move")

    await touch_session(session_id, last_activity=int(time.time()))
    return _game_state_response(game)
