"""
LeaderboardService - Ranks users by points, per month and all-time.

Monthly points are pre-aggregated upstream (one row per user and month);
all-time points are summed here. Rankings are computed on-the-fly.

Tie-break: equal points are ordered by join date (earliest first), then by
user id, so the ranking is deterministic. Ranks are 1-based positions in
that order: no gaps and no shared ranks.
"""

from collections import Counter, defaultdict
from datetime import datetime, timezone
from typing import Iterable, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel

from pokemon_bingo.core.config import get_settings
from pokemon_bingo.models.leaderboard import LeaderboardEntry
from pokemon_bingo.models.month import Month
from pokemon_bingo.models.points import (
    AchievementCounts,
    AchievementFlags,
    BingoAchievement,
    MonthPoints,
    MonthRank,
    UserMonthlyPoints,
)
from pokemon_bingo.models.user import User
from pokemon_bingo.repositories.points_repository import PointsRepository
from pokemon_bingo.repositories.user_repository import UserRepository
from pokemon_bingo.services.enrichment import best_effort, fetch_live_statuses, live_status_for

SCOPE_MONTHLY = "monthly"
SCOPE_ALLTIME = "alltime"

_LATEST = datetime.max.replace(tzinfo=timezone.utc)


class LeaderboardServiceError(Exception):
    """Base exception for leaderboard service errors."""
    pass


class InvalidScopeError(LeaderboardServiceError):
    """Raised for an unknown leaderboard scope."""
    pass


class PointsRow(BaseModel):
    """One user's points inside a scope, ready to rank."""
    id: str
    user_id: str
    points: int
    joined_at: Optional[datetime] = None
    rank: int = 0


# ============================================
# Pure ranking helpers
# ============================================

def rank_entries(rows: Iterable[PointsRow]) -> list[PointsRow]:
    """Sort by points descending (ties: join date, then user id) and number 1..N."""
    ordered = sorted(
        rows,
        key=lambda r: (-r.points, r.joined_at or _LATEST, r.user_id)
    )
    return [row.model_copy(update={"rank": idx + 1}) for idx, row in enumerate(ordered)]


def find_user_rank(ranked: list[PointsRow], user_id: str) -> Optional[int]:
    """1-based rank of the user, or None when unranked."""
    for row in ranked:
        if row.user_id == user_id:
            return row.rank
    return None


def sum_points_by_user(rows: Iterable[UserMonthlyPoints]) -> list[PointsRow]:
    """All-time aggregation; users keep the order they were first seen in."""
    totals: dict[str, int] = {}
    for row in rows:
        totals[row.user_id] = totals.get(row.user_id, 0) + row.points

    return [PointsRow(id=user_id, user_id=user_id, points=points) for user_id, points in totals.items()]


def best_point_month(monthly: Iterable[MonthPoints]) -> Optional[MonthPoints]:
    """Month with the most points; the first month seen wins ties."""
    best = None
    for item in monthly:
        if best is None or item.points > best.points:
            best = item
    return best


def best_ranked_month(
    user_id: str,
    ranked_by_month: dict[int, list[PointsRow]],
    months: Iterable[Month]
) -> Optional[MonthRank]:
    """Month where the user ranked best; the first month seen wins ties."""
    best = None
    for month in months:
        rank = find_user_rank(ranked_by_month.get(month.id, []), user_id)
        if rank is None:
            continue
        if best is None or rank < best.rank:
            best = MonthRank(month=month.month_year_display, rank=rank)
    return best


def achievement_flags(achievements: Iterable[BingoAchievement]) -> dict[str, AchievementFlags]:
    flags: dict[str, dict[str, bool]] = defaultdict(dict)
    for a in achievements:
        flags[a.user_id][a.achievement_type] = True
    return {user_id: AchievementFlags(**f) for user_id, f in flags.items()}


def achievement_counts(achievements: Iterable[BingoAchievement]) -> dict[str, AchievementCounts]:
    counts: dict[str, Counter] = defaultdict(Counter)
    for a in achievements:
        counts[a.user_id][a.achievement_type] += 1
    return {user_id: AchievementCounts(**dict(c)) for user_id, c in counts.items()}


# ============================================
# Service
# ============================================

class LeaderboardService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.points_repo = PointsRepository(db)
        self.user_repo = UserRepository(db)
        self.settings = get_settings()

    async def _load_users(self, user_ids: list[str]) -> dict[str, User]:
        return await best_effort(self.user_repo.get_by_ids(user_ids), {}, "User details")

    @staticmethod
    def _attach_join_dates(rows: list[PointsRow], users: dict[str, User]) -> list[PointsRow]:
        return [
            row.model_copy(update={"joined_at": users[row.user_id].created_at})
            if row.user_id in users else row
            for row in rows
        ]

    async def _scope_rows(self, scope: str, month_id: Optional[int]) -> list[PointsRow]:
        """Points rows for the scope. A failed points read propagates."""
        if scope == SCOPE_MONTHLY:
            if month_id is None:
                raise InvalidScopeError("Monthly leaderboard requires a month")
            points = await self.points_repo.get_for_month(month_id)
            return [PointsRow(id=p.id, user_id=p.user_id, points=p.points) for p in points]

        if scope == SCOPE_ALLTIME:
            return sum_points_by_user(await self.points_repo.get_all())

        raise InvalidScopeError(f"Unknown leaderboard scope: {scope}")

    async def ranked_rows(
        self,
        scope: str = SCOPE_ALLTIME,
        month_id: Optional[int] = None
    ) -> list[PointsRow]:
        """Full ranked sequence for a scope, without enrichment."""
        rows = await self._scope_rows(scope, month_id)
        users = await self._load_users([r.user_id for r in rows])
        return rank_entries(self._attach_join_dates(rows, users))

    async def ranked_rows_by_month(self) -> dict[int, list[PointsRow]]:
        """Every month's full ranked sequence from a single points read."""
        all_points = await self.points_repo.get_all()
        users = await self._load_users(list({p.user_id for p in all_points}))

        grouped: dict[int, list[PointsRow]] = defaultdict(list)
        for p in all_points:
            grouped[p.month_id].append(PointsRow(id=p.id, user_id=p.user_id, points=p.points))

        return {
            month_id: rank_entries(self._attach_join_dates(rows, users))
            for month_id, rows in grouped.items()
        }

    async def get_leaderboard(
        self,
        scope: str = SCOPE_MONTHLY,
        month_id: Optional[int] = None,
        limit: Optional[int] = None
    ) -> list[LeaderboardEntry]:
        """
        Ranked leaderboard with display data, achievements and live status.

        Only the points read can fail the request; the rest degrades to
        defaults.
        """
        rows = await self._scope_rows(scope, month_id)
        users = await self._load_users([r.user_id for r in rows])

        ranked = rank_entries(self._attach_join_dates(rows, users))
        if limit is not None:
            ranked = ranked[:limit]

        user_ids = [r.user_id for r in ranked]
        achievements = await best_effort(
            self.points_repo.get_achievements(
                user_ids=user_ids,
                month_id=month_id if scope == SCOPE_MONTHLY else None
            ),
            [],
            "Achievements",
        )
        flags = achievement_flags(achievements) if scope == SCOPE_MONTHLY else {}
        counts = achievement_counts(achievements) if scope == SCOPE_ALLTIME else {}

        statuses = await fetch_live_statuses(
            users[uid].twitch_url for uid in user_ids if uid in users
        )

        entries = []
        for row in ranked:
            user = users.get(row.user_id)
            live = live_status_for(statuses, user.twitch_url if user else None)

            entries.append(LeaderboardEntry(
                rank=row.rank,
                id=row.id,
                user_id=row.user_id,
                username=user.username if user else "Unknown",
                display_name=user.name if user else "Unknown",
                avatar_url=user.avatar_url if user else None,
                created_at=user.created_at if user else None,
                points=row.points,
                is_live=live.is_live,
                viewer_count=live.viewer_count,
                hex_code=(user.hex_code if user else None) or self.settings.default_hex_code,
                achievements=flags.get(row.user_id, AchievementFlags()) if scope == SCOPE_MONTHLY else None,
                achievement_counts=counts.get(row.user_id, AchievementCounts()) if scope == SCOPE_ALLTIME else None,
            ))

        return entries
