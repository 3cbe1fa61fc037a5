"""Blackjack API endpoints."""

import time
from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException

from api.dependencies import get_progress_store
from api.schemas import (
    ActionRequest,
    BetChangeRequest,
    BetRequest,
    BlackjackStateResponse,
    CardResponse,
    DealerStepRequest,
    HandResponse,
    SessionResponse,
)
from api.session import drop_expired_games, ensure_session, require_session, touch_session
from config import config
from core.game import BlackjackGame, BlackjackPhase
from core.game.dealer import DealerAction
from core.hand import Hand
from core.progress import GameType, ProgressStore

router = APIRouter()

# Live tables, keyed by session token
_games: dict[str, BlackjackGame] = {}


def _hand_to_response(hand: Hand) -> HandResponse:
    """Convert a Hand to HandResponse."""
    return HandResponse(
        cards=[CardResponse.from_card(c) for c in hand.cards],
        value=hand.visible_value,
        is_busted=hand.visible_value > 21,
    )


def _game_state_response(
    game: BlackjackGame,
    dealer_next_action: DealerAction | None = None,
) -> BlackjackStateResponse:
    """Convert game state to response."""
    return BlackjackStateResponse(
        phase=game.state.value,
        round_id=game.round_id,
        player_hand=_hand_to_response(game.player_hand),
        dealer_hand=_hand_to_response(game.dealer_hand),
        chips=game.chips,
        bet=game.bet,
        table_bet=game.table_bet,
        result=game.result.value if game.result else None,
        result_message=game.result_message,
        result_description=game.result_description,
        net_result=game.net_result,
        can_hit=game.can_hit,
        can_stand=game.can_stand,
        can_double=game.can_double,
        dealer_next_action=dealer_next_action.value if dealer_next_action else None,
    )


def _get_game(session_id: str) -> BlackjackGame:
    """Get the table of a session."""
    game = _games.get(session_id)
    if game is None:
        raise HTTPException(status_code=404, detail="No blackjack table for this session")
    return game


@router.post("/new")
async def new_game(
    progress: Annotated[ProgressStore, Depends(get_progress_store)],
    session_id: Annotated[str | None, Header(alias="X-Session-ID")] = None,
) -> SessionResponse:
    """Open a fresh table, creating a session if needed."""
    session_id = await ensure_session(session_id)
    await drop_expired_games(_games)

    _games[session_id] = BlackjackGame(settings=config.blackjack, progress=progress)
    progress.start_game(GameType.BLACKJACK)
    await touch_session(session_id, last_activity=int(time.time()))
    return SessionResponse(session_id=session_id)


@router.get("/state")
async def get_state(
    session_id: Annotated[str, Depends(require_session)],
) -> BlackjackStateResponse:
    """Get current table state."""
    return _game_state_response(_get_game(session_id))


@router.post("/bet/change")
async def change_bet(
    request: BetChangeRequest,
    session_id: Annotated[str, Depends(require_session)],
) -> BlackjackStateResponse:
    """Raise or lower the table bet."""
    game = _get_game(session_id)
    game.change_bet(request.delta)
    return _game_state_response(game)


@router.post("/bet")
async def place_bet(
    request: BetRequest,
    session_id: Annotated[str, Depends(require_session)],
) -> BlackjackStateResponse:
    """Place a bet and deal cards."""
    game = _get_game(session_id)

    if not game.start_round(request.amount):
        raise HTTPException(status_code=400, detail="Bet declined")

    await touch_session(session_id, last_activity=int(time.time()))
    return _game_state_response(game)


@router.post("/action")
async def player_action(
    request: ActionRequest,
    session_id: Annotated[str, Depends(require_session)],
) -> BlackjackStateResponse:
    """Execute a player action."""
    game = _get_game(session_id)

    actions = {
        "hit": game.hit,
        "stand": game.stand,
        "double": game.double_down,
    }

    if not actions[request.action]():
        raise HTTPException(status_code=400, detail=f"Cannot {request.action} now")

    next_action = DealerAction.REVEAL if game.state == BlackjackPhase.DEALER else None
    return _game_state_response(game, next_action)


@router.post("/dealer-step")
async def dealer_step(
    request: DealerStepRequest,
    session_id: Annotated[str, Depends(require_session)],
) -> BlackjackStateResponse:
    """
    Advance the dealer turn by one step.

    Clients call this on a timer while the phase is 'dealer'. Steps sent for
    an earlier round are ignored.
    """
    game = _get_game(session_id)
    next_action = game.dealer_step(request.round_id)
    return _game_state_response(game, next_action)
