"""
Unit tests for LeaderboardService and the ranking helpers
"""

import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

from pymongo.errors import PyMongoError

from pokemon_bingo.models.month import Month
from pokemon_bingo.models.points import BingoAchievement, MonthPoints, UserMonthlyPoints
from pokemon_bingo.services.leaderboard_service import (
    SCOPE_ALLTIME,
    SCOPE_MONTHLY,
    InvalidScopeError,
    LeaderboardService,
    PointsRow,
    achievement_counts,
    achievement_flags,
    best_point_month,
    best_ranked_month,
    find_user_rank,
    rank_entries,
    sum_points_by_user,
)
from pokemon_bingo.services.live_status_service import LiveStatus

ACTIVE_MONTH_ID = 2
PAST_MONTH_ID = 1


def row(user_id: str, points: int, joined: datetime = None) -> PointsRow:
    return PointsRow(id=f"row-{user_id}", user_id=user_id, points=points, joined_at=joined)


class TestRanking:
    """Pure ranking helpers."""

    def test_descending_points(self):
        ranked = rank_entries([row("a", 50), row("b", 80), row("c", 10)])

        assert [r.user_id for r in ranked] == ["b", "a", "c"]
        assert [r.rank for r in ranked] == [1, 2, 3]

    def test_tie_broken_by_join_date(self):
        """A:50, B:80, C:80 with C joined first -> [C, B, A]."""
        ranked = rank_entries([
            row("A", 50, datetime(2024, 1, 1, tzinfo=timezone.utc)),
            row("B", 80, datetime(2024, 3, 1, tzinfo=timezone.utc)),
            row("C", 80, datetime(2024, 2, 1, tzinfo=timezone.utc)),
        ])

        assert [r.user_id for r in ranked] == ["C", "B", "A"]
        assert [r.rank for r in ranked] == [1, 2, 3]

    def test_tie_without_join_date_falls_back_to_user_id(self):
        ranked = rank_entries([row("zed", 10), row("amy", 10)])
        assert [r.user_id for r in ranked] == ["amy", "zed"]

    def test_unknown_join_date_ranks_after_known(self):
        ranked = rank_entries([
            row("a", 10),
            row("b", 10, datetime(2024, 1, 1, tzinfo=timezone.utc)),
        ])
        assert [r.user_id for r in ranked] == ["b", "a"]

    def test_ranks_are_a_permutation(self):
        rows = [row(f"u{i}", points) for i, points in enumerate([5, 5, 5, 3, 9, 0, 9])]
        ranked = rank_entries(rows)

        assert sorted(r.rank for r in ranked) == list(range(1, len(rows) + 1))
        points = [r.points for r in ranked]
        assert points == sorted(points, reverse=True)

    def test_input_order_does_not_matter(self):
        rows = [row("a", 5), row("b", 5), row("c", 7)]
        assert rank_entries(rows) == rank_entries(list(reversed(rows)))

    def test_empty(self):
        assert rank_entries([]) == []

    def test_find_user_rank_agrees_with_ranked_sequence(self):
        ranked = rank_entries([row("a", 5), row("b", 9), row("c", 7)])

        for position, r in enumerate(ranked, start=1):
            assert find_user_rank(ranked, r.user_id) == position

    def test_find_user_rank_unranked(self):
        ranked = rank_entries([row("a", 5)])
        assert find_user_rank(ranked, "ghost") is None

    def test_sum_points_by_user(self):
        totals = sum_points_by_user([
            UserMonthlyPoints(id="1", user_id="a", month_id=1, points=10),
            UserMonthlyPoints(id="2", user_id="b", month_id=1, points=5),
            UserMonthlyPoints(id="3", user_id="a", month_id=2, points=7),
        ])

        assert {t.user_id: t.points for t in totals} == {"a": 17, "b": 5}
        assert all(t.id == t.user_id for t in totals)


class TestBestMonths:

    def test_best_point_month(self):
        best = best_point_month([
            MonthPoints(month="Jan", points=10),
            MonthPoints(month="Feb", points=30),
            MonthPoints(month="Mar", points=20),
        ])
        assert best == MonthPoints(month="Feb", points=30)

    def test_best_point_month_tie_keeps_first(self):
        best = best_point_month([
            MonthPoints(month="Jan", points=30),
            MonthPoints(month="Feb", points=30),
        ])
        assert best.month == "Jan"

    def test_best_point_month_empty(self):
        assert best_point_month([]) is None

    def test_best_ranked_month(self):
        months = [
            Month(id=1, month_year_display="Jan", start_date=datetime(2025, 1, 1), end_date=datetime(2025, 1, 31)),
            Month(id=2, month_year_display="Feb", start_date=datetime(2025, 2, 1), end_date=datetime(2025, 2, 28)),
            Month(id=3, month_year_display="Mar", start_date=datetime(2025, 3, 1), end_date=datetime(2025, 3, 31)),
        ]
        by_month = {
            1: rank_entries([row("me", 5), row("x", 9)]),
            2: rank_entries([row("me", 9), row("x", 5)]),
            3: rank_entries([row("me", 9), row("x", 1)]),
        }

        best = best_ranked_month("me", by_month, months)

        assert best.month == "Feb"
        assert best.rank == 1

    def test_best_ranked_month_unranked(self):
        assert best_ranked_month("me", {}, []) is None


class TestAchievements:

    def test_flags(self):
        flags = achievement_flags([
            BingoAchievement(user_id="a", month_id=1, achievement_type="row"),
            BingoAchievement(user_id="a", month_id=1, achievement_type="blackout"),
        ])

        assert flags["a"].row is True
        assert flags["a"].blackout is True
        assert flags["a"].column is False

    def test_counts(self):
        counts = achievement_counts([
            BingoAchievement(user_id="a", month_id=1, achievement_type="row"),
            BingoAchievement(user_id="a", month_id=2, achievement_type="row"),
            BingoAchievement(user_id="a", month_id=2, achievement_type="x"),
        ])

        assert counts["a"].row == 2
        assert counts["a"].x == 1
        assert counts["a"].blackout == 0


class TestLeaderboardService:
    """Leaderboard built from the sample points."""

    @pytest.mark.asyncio
    async def test_monthly_leaderboard(self, seeded_db):
        service = LeaderboardService(seeded_db)

        entries = await service.get_leaderboard(SCOPE_MONTHLY, ACTIVE_MONTH_ID)

        # ash and misty tie on 40; ash joined first
        assert [e.user_id for e in entries] == ["user-ash", "user-misty"]
        assert [e.rank for e in entries] == [1, 2]
        assert entries[0].id == "p4"
        assert entries[0].achievements.row is True
        assert entries[0].achievement_counts is None
        assert entries[1].achievements.row is False

    @pytest.mark.asyncio
    async def test_monthly_requires_month(self, seeded_db):
        service = LeaderboardService(seeded_db)

        with pytest.raises(InvalidScopeError):
            await service.get_leaderboard(SCOPE_MONTHLY)

    @pytest.mark.asyncio
    async def test_unknown_scope(self, seeded_db):
        service = LeaderboardService(seeded_db)

        with pytest.raises(InvalidScopeError):
            await service.get_leaderboard("weekly")

    @pytest.mark.asyncio
    async def test_alltime_leaderboard(self, seeded_db):
        service = LeaderboardService(seeded_db)

        entries = await service.get_leaderboard(SCOPE_ALLTIME)

        assert [(e.user_id, e.points) for e in entries] == [("user-misty", 90), ("user-ash", 70)]
        assert entries[0].id == "user-misty"
        assert entries[0].achievement_counts.blackout == 1
        assert entries[0].achievement_counts.row == 1
        assert entries[0].achievements is None

    @pytest.mark.asyncio
    async def test_display_defaults(self, seeded_db):
        """misty has no display name and no hex code."""
        service = LeaderboardService(seeded_db)

        entries = await service.get_leaderboard(SCOPE_ALLTIME)
        misty = entries[0]

        assert misty.display_name == "misty"
        assert misty.hex_code == "#9147ff"
        assert misty.is_live is False
        assert misty.viewer_count is None

        ash = entries[1]
        assert ash.display_name == "Ash"
        assert ash.hex_code == "#ff0000"

    @pytest.mark.asyncio
    async def test_limit_applies_after_ranking(self, seeded_db):
        service = LeaderboardService(seeded_db)

        entries = await service.get_leaderboard(SCOPE_ALLTIME, limit=1)

        assert len(entries) == 1
        assert entries[0].user_id == "user-misty"

    @pytest.mark.asyncio
    async def test_unknown_user_gets_placeholder(self, seeded_db):
        await seeded_db["user_monthly_points"].insert_one(
            {"id": "p9", "user_id": "ghost", "month_id": ACTIVE_MONTH_ID, "points": 1}
        )
        service = LeaderboardService(seeded_db)

        entries = await service.get_leaderboard(SCOPE_MONTHLY, ACTIVE_MONTH_ID)

        ghost = entries[-1]
        assert ghost.user_id == "ghost"
        assert ghost.username == "Unknown"
        assert ghost.created_at is None

    @pytest.mark.asyncio
    async def test_live_status_is_attached(self, seeded_db):
        statuses = {"ash": LiveStatus(is_live=True, viewer_count=42)}

        with patch(
            "pokemon_bingo.services.leaderboard_service.fetch_live_statuses",
            new=AsyncMock(return_value=statuses)
        ):
            service = LeaderboardService(seeded_db)
            entries = await service.get_leaderboard(SCOPE_MONTHLY, ACTIVE_MONTH_ID)

        ash = next(e for e in entries if e.user_id == "user-ash")
        assert ash.is_live is True
        assert ash.viewer_count == 42

    @pytest.mark.asyncio
    async def test_failed_achievements_degrade_to_defaults(self, seeded_db):
        service = LeaderboardService(seeded_db)
        service.points_repo.get_achievements = AsyncMock(side_effect=PyMongoError("boom"))

        entries = await service.get_leaderboard(SCOPE_MONTHLY, ACTIVE_MONTH_ID)

        assert len(entries) == 2
        assert all(e.achievements.row is False for e in entries)

    @pytest.mark.asyncio
    async def test_failed_user_lookup_degrades(self, seeded_db):
        service = LeaderboardService(seeded_db)
        service.user_repo.get_by_ids = AsyncMock(side_effect=PyMongoError("boom"))

        entries = await service.get_leaderboard(SCOPE_ALLTIME)

        assert [e.points for e in entries] == [90, 70]
        assert all(e.username == "Unknown" for e in entries)

    @pytest.mark.asyncio
    async def test_failed_points_read_propagates(self, seeded_db):
        service = LeaderboardService(seeded_db)
        service.points_repo.get_all = AsyncMock(side_effect=PyMongoError("boom"))

        with pytest.raises(PyMongoError):
            await service.get_leaderboard(SCOPE_ALLTIME)

    @pytest.mark.asyncio
    async def test_ranked_rows_by_month(self, seeded_db):
        service = LeaderboardService(seeded_db)

        by_month = await service.ranked_rows_by_month()

        assert [r.user_id for r in by_month[PAST_MONTH_ID]] == ["user-misty", "user-ash"]
        assert [r.user_id for r in by_month[ACTIVE_MONTH_ID]] == ["user-ash", "user-misty"]
