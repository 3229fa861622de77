from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from pokemon_bingo.models.points import AchievementCounts, AchievementFlags


class LeaderboardEntry(BaseModel):
    """Entrada en la tabla de clasificación (resultado agregado)"""

    rank: int
    id: str  # id de la fila de puntos (mensual) o user_id (all-time)
    user_id: str
    username: str
    display_name: str
    avatar_url: Optional[str] = None
    created_at: Optional[datetime] = None

    points: int

    is_live: bool = False
    viewer_count: Optional[int] = None
    hex_code: str

    achievements: Optional[AchievementFlags] = None         # scope monthly
    achievement_counts: Optional[AchievementCounts] = None  # scope alltime

    class Config:
        populate_by_name = True
