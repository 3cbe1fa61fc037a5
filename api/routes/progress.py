"""Player progress API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from api.dependencies import get_progress_store
from api.schemas import SettingsUpdateRequest, StartGameRequest
from core.progress import AppState, ProgressStore

router = APIRouter()

Progress = Annotated[ProgressStore, Depends(get_progress_store)]


@router.get("")
async def get_progress(progress: Progress) -> AppState:
    """Get the player profile, statistics and settings."""
    return progress.state


@router.post("/settings")
async def update_settings(request: SettingsUpdateRequest, progress: Progress) -> AppState:
    """Change some settings; omitted or null fields keep their value."""
    return progress.update_settings(**request.model_dump(exclude_unset=True, exclude_none=True))


@router.post("/start")
async def start_game(request: StartGameRequest, progress: Progress) -> AppState:
    """Mark a game as being played."""
    return progress.start_game(request.game_type)


@router.post("/pause")
async def pause_game(progress: Progress) -> AppState:
    return progress.pause_game()


@router.post("/resume")
async def resume_game(progress: Progress) -> AppState:
    return progress.resume_game()


@router.post("/reset")
async def reset_game(progress: Progress) -> AppState:
    """Leave the current game without recording a result."""
    return progress.reset_game()
