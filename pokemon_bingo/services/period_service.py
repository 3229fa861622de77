"""
PeriodService - Resolves which bingo month is active.

A moderator can carry a day offset to preview past or future months while
testing; everybody else resolves against the real clock.
"""

from datetime import datetime, timedelta
from typing import Iterable, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from pokemon_bingo.core.timeutils import as_utc, utcnow
from pokemon_bingo.models.month import Month
from pokemon_bingo.repositories.month_repository import MonthRepository


class PeriodServiceError(Exception):
    """Base exception for period resolution errors."""
    pass


class NoActiveMonthError(PeriodServiceError):
    """Raised when no month contains the effective date."""
    pass


class AmbiguousActiveMonthError(PeriodServiceError):
    """Raised when more than one month contains the effective date."""
    pass


def effective_date(now: datetime, offset_days: int = 0) -> datetime:
    return as_utc(now) + timedelta(days=offset_days)


def resolve_active_month(
    months: Iterable[Month],
    now: datetime,
    offset_days: int = 0
) -> Month:
    """
    Pick the single month whose [start_date, end_date] contains now + offset.

    Raises NoActiveMonthError on zero matches and AmbiguousActiveMonthError
    when the month table overlaps.
    """
    moment = effective_date(now, offset_days)
    matches = [m for m in months if m.contains(moment)]

    if not matches:
        raise NoActiveMonthError("No active bingo month found")

    if len(matches) > 1:
        ids = ", ".join(str(m.id) for m in matches)
        raise AmbiguousActiveMonthError(
            f"Multiple bingo months are active on {moment.date().isoformat()}: {ids}"
        )

    return matches[0]


class PeriodService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.month_repo = MonthRepository(db)

    async def get_active_month(
        self,
        offset_days: int = 0,
        now: Optional[datetime] = None
    ) -> Month:
        months = await self.month_repo.get_all()
        return resolve_active_month(months, now or utcnow(), offset_days)

    async def get_active_month_or_none(
        self,
        offset_days: int = 0,
        now: Optional[datetime] = None
    ) -> Optional[Month]:
        """Same as get_active_month, but "no month" is not an error."""
        try:
            return await self.get_active_month(offset_days, now)
        except NoActiveMonthError:
            return None
