"""
Controlador de embajadores - Streamers que promocionan el bingo
"""

from fastapi import APIRouter

from pokemon_bingo.core.dependencies import Database
from pokemon_bingo.services.ambassador_service import AmbassadorService, AmbassadorStatus


router = APIRouter(prefix="/ambassadors", tags=["ambassadors"])


@router.get("", response_model=list[AmbassadorStatus])
async def get_ambassadors(db: Database):
    """
    Listar embajadores con su estado en Twitch.

    Si Twitch no responde, todos aparecen offline.
    """
    ambassador_service = AmbassadorService(db)
    return await ambassador_service.get_ambassadors()
