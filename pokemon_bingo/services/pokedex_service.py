"""
PokedexService - Shiny catalog, submission candidates and recent catches.
"""

from collections import defaultdict
from datetime import datetime
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel, Field

from pokemon_bingo.core.config import get_settings
from pokemon_bingo.models.month import Month
from pokemon_bingo.models.points import AchievementFlags
from pokemon_bingo.repositories.entry_repository import EntryRepository
from pokemon_bingo.repositories.points_repository import PointsRepository
from pokemon_bingo.repositories.pokemon_repository import PokemonRepository
from pokemon_bingo.repositories.user_repository import UserRepository
from pokemon_bingo.services.enrichment import best_effort


class PokedexServiceError(Exception):
    """Base exception for pokedex service errors."""
    pass


class PokemonNotFoundError(PokedexServiceError):
    """Raised when the Pokémon does not exist."""
    pass


class PokedexItem(BaseModel):
    id: int
    national_dex_id: int
    name: str
    display_name: str
    img_url: Optional[str] = None
    caught: bool = False
    in_pool: bool = False


class Pokedex(BaseModel):
    pokemon: list[PokedexItem]
    caught_count: int = Field(alias="caughtCount")
    total_count: int = Field(alias="totalCount")

    class Config:
        populate_by_name = True


class AvailablePokemon(BaseModel):
    id: int
    national_dex_id: int
    name: str
    display_name: str
    img_url: Optional[str] = None
    gif_url: Optional[str] = None
    month_id: int
    position: int


class RecentCatch(BaseModel):
    id: str
    user_id: str
    month_id: int
    display_name: str
    avatar_url: Optional[str] = None
    hex_code: str
    caught_at: datetime
    achievements: AchievementFlags
    points: int = 0


class PokedexService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.pokemon_repo = PokemonRepository(db)
        self.entry_repo = EntryRepository(db)
        self.user_repo = UserRepository(db)
        self.points_repo = PointsRepository(db)
        self.settings = get_settings()

    async def get_pokedex(self, user_id: str, active_month: Optional[Month]) -> Pokedex:
        """
        Every shiny-eligible Pokémon with the user's caught flag (any month)
        and whether it is in the active month's pool.
        """
        catalog = await self.pokemon_repo.get_all_shiny()
        caught_ids = {e.pokemon_id for e in await self.entry_repo.get_user_entries(user_id)}

        pool_ids: set[int] = set()
        if active_month is not None:
            pool_ids = {slot.pokemon_id for slot in await self.pokemon_repo.get_pool(active_month.id)}

        items = [
            PokedexItem(
                id=p.id,
                national_dex_id=p.national_dex_id,
                name=p.name,
                display_name=p.label,
                img_url=p.img_url,
                caught=p.id in caught_ids,
                in_pool=p.id in pool_ids,
            )
            for p in catalog
        ]

        return Pokedex(
            pokemon=items,
            caught_count=sum(1 for i in items if i.caught),
            total_count=len(items),
        )

    async def get_available(self, user_id: str, month: Month) -> list[AvailablePokemon]:
        """Pool Pokémon of the month that the user has not caught yet in it."""
        pool = await self.pokemon_repo.get_pool(month.id)
        pokemon_by_id = await self.pokemon_repo.get_shiny_by_ids([s.pokemon_id for s in pool])
        caught_ids = {
            e.pokemon_id
            for e in await self.entry_repo.get_user_entries_for_month(user_id, month.id)
        }

        available = []
        seen: set[int] = set()
        for slot in pool:
            pokemon = pokemon_by_id.get(slot.pokemon_id)
            if pokemon is None or pokemon.id in caught_ids or pokemon.id in seen:
                continue
            seen.add(pokemon.id)
            available.append(AvailablePokemon(
                id=pokemon.id,
                national_dex_id=pokemon.national_dex_id,
                name=pokemon.name,
                display_name=pokemon.label,
                img_url=pokemon.img_url,
                gif_url=pokemon.gif_url,
                month_id=month.id,
                position=slot.position,
            ))

        available.sort(key=lambda p: p.national_dex_id)
        return available

    async def get_recent_catches(self, pokemon_id: int, limit: Optional[int] = None) -> list[RecentCatch]:
        """Latest catches of a Pokémon, newest first, with catcher details."""
        pokemon = await self.pokemon_repo.get_by_id(pokemon_id)
        if not pokemon:
            raise PokemonNotFoundError(f"Pokemon {pokemon_id} not found")

        entries = await self.entry_repo.get_recent_for_pokemon(
            pokemon_id,
            limit or self.settings.recent_catches_limit
        )
        if not entries:
            return []

        user_ids = list({e.user_id for e in entries})
        users = await best_effort(self.user_repo.get_by_ids(user_ids), {}, "User details")
        achievements = await best_effort(
            self.points_repo.get_achievements(user_ids=user_ids), [], "Achievements"
        )
        points = await best_effort(self.points_repo.get_for_users(user_ids), [], "Monthly points")

        flags: dict[tuple[str, int], dict[str, bool]] = defaultdict(dict)
        for a in achievements:
            flags[(a.user_id, a.month_id)][a.achievement_type] = True

        points_by_key: dict[tuple[str, int], int] = defaultdict(int)
        for p in points:
            points_by_key[(p.user_id, p.month_id)] += p.points

        catches = []
        for entry in entries:
            user = users.get(entry.user_id)
            key = (entry.user_id, entry.month_id)
            catches.append(RecentCatch(
                id=entry.id,
                user_id=entry.user_id,
                month_id=entry.month_id,
                display_name=user.name if user else "Unknown",
                avatar_url=user.avatar_url if user else None,
                hex_code=(user.hex_code if user else None) or self.settings.default_hex_code,
                caught_at=entry.created_at,
                achievements=AchievementFlags(**flags.get(key, {})),
                points=points_by_key.get(key, 0),
            ))

        return catches
