"""
Controlador del bingo - Tablero del mes activo
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel

from pokemon_bingo.core.dependencies import ActiveMonth, Database, OptionalIdentity
from pokemon_bingo.models.board import BoardCell
from pokemon_bingo.models.points import AchievementFlags
from pokemon_bingo.repositories.points_repository import PointsRepository
from pokemon_bingo.services.board_service import BoardService
from pokemon_bingo.services.enrichment import best_effort
from pokemon_bingo.services.leaderboard_service import achievement_flags


router = APIRouter(prefix="/bingo", tags=["bingo"])


class BoardResponse(BaseModel):
    """Tablero 5x5 del mes con el estado del usuario (si hay sesión)."""
    month: str
    month_id: int
    start_date: datetime
    end_date: datetime
    board: list[BoardCell]
    user_authenticated: bool
    achievements: Optional[AchievementFlags] = None


@router.get("/board", response_model=BoardResponse)
async def get_board(
    identity: OptionalIdentity,
    month: ActiveMonth,
    db: Database
):
    """
    Obtener el tablero del mes activo.

    Sin sesión se devuelve el tablero sin marcar. Con sesión, las casillas
    capturadas salen marcadas y se incluyen los logros del mes.
    """
    board_service = BoardService(db)
    board = await board_service.get_board(month.id, identity.user_id)

    achievements = None
    if identity.is_authenticated:
        rows = await best_effort(
            PointsRepository(db).get_achievements(user_ids=[identity.user_id], month_id=month.id),
            [],
            "Achievements",
        )
        achievements = achievement_flags(rows).get(identity.user_id, AchievementFlags())

    return BoardResponse(
        month=month.month_year_display,
        month_id=month.id,
        start_date=month.start_date,
        end_date=month.end_date,
        board=board,
        user_authenticated=identity.is_authenticated,
        achievements=achievements,
    )
