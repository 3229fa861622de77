"""
Controlador de perfiles - Estadísticas y tablero de un usuario
"""

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel

from pokemon_bingo.core.dependencies import ActiveMonth, Database
from pokemon_bingo.models.board import BoardCell
from pokemon_bingo.services.board_service import BoardService
from pokemon_bingo.services.profile_service import Profile, ProfileNotFoundError, ProfileService


router = APIRouter(prefix="/profile", tags=["profile"])


class ProfileBoardResponse(BaseModel):
    """Tablero del mes activo visto desde el usuario del perfil."""
    month: str
    month_id: int
    board: list[BoardCell]


@router.get("/{user_id}", response_model=Profile)
async def get_profile(user_id: str, db: Database):
    """
    Obtener el perfil público de un usuario.

    Incluye totales, ranking global, mejor mes y puntos por mes.
    """
    profile_service = ProfileService(db)

    try:
        return await profile_service.get_profile(user_id)
    except ProfileNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )


@router.get("/{user_id}/board", response_model=ProfileBoardResponse)
async def get_profile_board(user_id: str, month: ActiveMonth, db: Database):
    """
    Obtener el tablero del mes activo marcado con las capturas del usuario.

    El mes lo decide quien mira (offset de moderador), las casillas el dueño del perfil.
    """
    board_service = BoardService(db)
    board = await board_service.get_board(month.id, user_id)

    return ProfileBoardResponse(
        month=month.month_year_display,
        month_id=month.id,
        board=board,
    )
