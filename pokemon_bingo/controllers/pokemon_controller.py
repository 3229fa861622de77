"""
Controlador de Pokémon - Capturas recientes de un Pokémon
"""

from fastapi import APIRouter, HTTPException, status

from pokemon_bingo.core.dependencies import Database
from pokemon_bingo.services.pokedex_service import PokedexService, PokemonNotFoundError, RecentCatch


router = APIRouter(prefix="/pokemon", tags=["pokemon"])


@router.get("/{pokemon_id}/recent-catches", response_model=list[RecentCatch])
async def get_recent_catches(pokemon_id: int, db: Database):
    """
    Últimas capturas de un Pokémon (más nuevas primero).
    """
    pokedex_service = PokedexService(db)

    try:
        return await pokedex_service.get_recent_catches(pokemon_id)
    except PokemonNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
