"""
Controlador de leaderboards - Endpoints de clasificación

Los puntos mensuales se calculan fuera de la API (pre-agregados).
Este controlador solo los ordena y los enriquece.
"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from pokemon_bingo.core.dependencies import Database, OptionalIdentity
from pokemon_bingo.models.leaderboard import LeaderboardEntry
from pokemon_bingo.services.leaderboard_service import (
    SCOPE_ALLTIME,
    SCOPE_MONTHLY,
    InvalidScopeError,
    LeaderboardService,
)
from pokemon_bingo.services.period_service import NoActiveMonthError, PeriodService


router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get("", response_model=list[LeaderboardEntry])
async def get_leaderboard(
    identity: OptionalIdentity,
    db: Database,
    scope: str = Query(SCOPE_MONTHLY, description="monthly | alltime"),
    limit: Optional[int] = Query(None, ge=1, le=500)
):
    """
    Obtener el leaderboard.

    - monthly: puntos del mes activo
    - alltime: suma de puntos de todos los meses
    """
    if scope not in (SCOPE_MONTHLY, SCOPE_ALLTIME):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid scope '{scope}'. Use 'monthly' or 'alltime'"
        )

    month_id = None
    if scope == SCOPE_MONTHLY:
        try:
            month = await PeriodService(db).get_active_month(identity.day_offset)
        except NoActiveMonthError as e:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=str(e)
            )
        month_id = month.id

    leaderboard_service = LeaderboardService(db)
    try:
        return await leaderboard_service.get_leaderboard(scope, month_id, limit)
    except InvalidScopeError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
