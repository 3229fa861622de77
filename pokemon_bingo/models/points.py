from typing import Optional
from pydantic import BaseModel

ACHIEVEMENT_TYPES = ("row", "column", "x", "blackout")


class UserMonthlyPoints(BaseModel):
    """Puntos de un usuario en un mes (pre-calculados fuera de la API)"""

    id: str
    user_id: str
    month_id: int

    points: int = 0
    bingos_completed: int = 0

    class Config:
        populate_by_name = True


class BingoAchievement(BaseModel):
    user_id: str
    month_id: int
    achievement_type: str  # row | column | x | blackout

    class Config:
        populate_by_name = True


class AchievementFlags(BaseModel):
    row: bool = False
    column: bool = False
    x: bool = False
    blackout: bool = False


class AchievementCounts(BaseModel):
    row: int = 0
    column: int = 0
    x: int = 0
    blackout: int = 0


class MonthPoints(BaseModel):
    month: str
    points: int


class MonthRank(BaseModel):
    month: str
    rank: Optional[int] = None
