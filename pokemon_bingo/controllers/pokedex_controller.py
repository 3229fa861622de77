"""
Controlador de la Pokédex - Catálogo de shinies con el progreso del usuario
"""

from fastapi import APIRouter

from pokemon_bingo.core.dependencies import CurrentUser, Database
from pokemon_bingo.services.period_service import PeriodService
from pokemon_bingo.services.pokedex_service import Pokedex, PokedexService


router = APIRouter(prefix="/pokedex", tags=["pokedex"])


@router.get("", response_model=Pokedex)
async def get_pokedex(user: CurrentUser, db: Database):
    """
    Obtener la Pokédex del usuario.

    Sin mes activo la Pokédex se sirve igual, con in_pool siempre en false.
    """
    month = await PeriodService(db).get_active_month_or_none(user.day_offset)

    pokedex_service = PokedexService(db)
    return await pokedex_service.get_pokedex(user.id, month)
