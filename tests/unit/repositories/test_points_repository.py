"""
Unit tests for PointsRepository, MonthRepository and ApprovalRepository
"""

import pytest
from datetime import datetime, timezone

from pokemon_bingo.models.approval import Approval
from pokemon_bingo.repositories.approval_repository import ApprovalRepository
from pokemon_bingo.repositories.month_repository import MonthRepository
from pokemon_bingo.repositories.points_repository import PointsRepository

ACTIVE_MONTH_ID = 2
PAST_MONTH_ID = 1


class TestPointsRepository:

    @pytest.mark.asyncio
    async def test_get_for_month(self, seeded_db):
        repo = PointsRepository(seeded_db)

        rows = await repo.get_for_month(PAST_MONTH_ID)

        assert {r.user_id: r.points for r in rows} == {"user-ash": 30, "user-misty": 50}

    @pytest.mark.asyncio
    async def test_get_for_user(self, seeded_db):
        repo = PointsRepository(seeded_db)

        rows = await repo.get_for_user("user-misty")

        assert sum(r.points for r in rows) == 90
        assert sum(r.bingos_completed for r in rows) == 2

    @pytest.mark.asyncio
    async def test_get_for_users(self, seeded_db):
        repo = PointsRepository(seeded_db)

        assert len(await repo.get_for_users(["user-ash", "user-misty"])) == 4
        assert await repo.get_for_users([]) == []

    @pytest.mark.asyncio
    async def test_get_achievements_filters(self, seeded_db):
        repo = PointsRepository(seeded_db)

        assert len(await repo.get_achievements()) == 3
        assert len(await repo.get_achievements(user_ids=["user-misty"])) == 2
        assert len(await repo.get_achievements(month_id=ACTIVE_MONTH_ID)) == 1
        assert await repo.get_achievements(user_ids=["user-misty"], month_id=ACTIVE_MONTH_ID) == []


class TestMonthRepository:

    @pytest.mark.asyncio
    async def test_get_all_sorted_by_start(self, seeded_db):
        repo = MonthRepository(seeded_db)

        months = await repo.get_all()

        assert [m.id for m in months] == [PAST_MONTH_ID, ACTIVE_MONTH_ID]


class TestApprovalRepository:

    @pytest.mark.asyncio
    async def test_create_and_get_pending(self, test_db):
        repo = ApprovalRepository(test_db)
        approval = Approval(
            id="a1",
            user_id="user-ash",
            pokemon_id=3,
            month_id=ACTIVE_MONTH_ID,
            proof_url="https://clips.twitch.tv/abc",
            created_at=datetime(2025, 1, 2, tzinfo=timezone.utc),
        )

        await repo.create(approval)
        pending = await repo.get_pending()

        assert [a.id for a in pending] == ["a1"]
        assert pending[0].status == "pending"
