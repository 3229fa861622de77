"""
ProfileService - Per-user stats page.

Built on the leaderboard rankings (overall rank, best ranked month) and the
user's catches and monthly points.
"""

from datetime import datetime
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel, Field

from pokemon_bingo.core.config import get_settings
from pokemon_bingo.models.points import MonthPoints, MonthRank
from pokemon_bingo.repositories.entry_repository import EntryRepository
from pokemon_bingo.repositories.month_repository import MonthRepository
from pokemon_bingo.repositories.points_repository import PointsRepository
from pokemon_bingo.repositories.pokemon_repository import PokemonRepository
from pokemon_bingo.repositories.user_repository import UserRepository
from pokemon_bingo.services.enrichment import best_effort
from pokemon_bingo.services.leaderboard_service import (
    SCOPE_ALLTIME,
    LeaderboardService,
    best_point_month,
    best_ranked_month,
    find_user_rank,
)


class ProfileServiceError(Exception):
    """Base exception for profile service errors."""
    pass


class ProfileNotFoundError(ProfileServiceError):
    """Raised when the user does not exist."""
    pass


class ProfileUser(BaseModel):
    id: str
    username: str
    display_name: str
    avatar_url: Optional[str] = None
    hex_code: str
    created_at: datetime


class ProfileStats(BaseModel):
    total_shinies: int = Field(alias="totalShinies")
    overall_rank: Optional[int] = Field(default=None, alias="overallRank")
    total_points: int = Field(alias="totalPoints")
    total_caught: int = Field(alias="totalCaught")
    total_pokemon: int = Field(alias="totalPokemon")
    highest_point_month: Optional[MonthPoints] = Field(default=None, alias="highestPointMonth")
    best_ranked_month: Optional[MonthRank] = Field(default=None, alias="bestRankedMonth")
    total_bingos: int = Field(alias="totalBingos")
    total_blackouts: int = Field(alias="totalBlackouts")

    class Config:
        populate_by_name = True


class Profile(BaseModel):
    user: ProfileUser
    stats: ProfileStats
    monthly_data: list[MonthPoints] = Field(alias="monthlyData")

    class Config:
        populate_by_name = True


class ProfileService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.user_repo = UserRepository(db)
        self.entry_repo = EntryRepository(db)
        self.points_repo = PointsRepository(db)
        self.pokemon_repo = PokemonRepository(db)
        self.month_repo = MonthRepository(db)
        self.leaderboard_service = LeaderboardService(db)
        self.settings = get_settings()

    async def get_profile(self, user_id: str) -> Profile:
        user = await self.user_repo.get_by_id(user_id)
        if not user:
            raise ProfileNotFoundError(f"User {user_id} not found")

        entries = await self.entry_repo.get_user_entries(user_id)
        total_pokemon = await self.pokemon_repo.count_shiny()
        user_points = await self.points_repo.get_for_user(user_id)
        months = await self.month_repo.get_all()

        points_by_month: dict[int, int] = {}
        for p in user_points:
            points_by_month[p.month_id] = points_by_month.get(p.month_id, 0) + p.points

        # Chronological, since months come back ordered by start date
        monthly_data = [
            MonthPoints(month=m.month_year_display, points=points_by_month[m.id])
            for m in months
            if m.id in points_by_month
        ]

        overall = await self.leaderboard_service.ranked_rows(SCOPE_ALLTIME)
        ranked_by_month = await self.leaderboard_service.ranked_rows_by_month()

        achievements = await best_effort(
            self.points_repo.get_achievements(user_ids=[user_id]),
            [],
            "Achievements",
        )

        stats = ProfileStats(
            total_shinies=len(entries),
            overall_rank=find_user_rank(overall, user_id),
            total_points=sum(p.points for p in user_points),
            total_caught=len({e.pokemon_id for e in entries}),
            total_pokemon=total_pokemon,
            highest_point_month=best_point_month(monthly_data),
            best_ranked_month=best_ranked_month(user_id, ranked_by_month, months),
            total_bingos=sum(p.bingos_completed for p in user_points),
            total_blackouts=sum(1 for a in achievements if a.achievement_type == "blackout"),
        )

        return Profile(
            user=ProfileUser(
                id=user.id,
                username=user.username,
                display_name=user.name,
                avatar_url=user.avatar_url,
                hex_code=user.hex_code or self.settings.default_hex_code,
                created_at=user.created_at,
            ),
            stats=stats,
            monthly_data=monthly_data,
        )
