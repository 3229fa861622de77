from typing import Optional
from pydantic import BaseModel, Field

from pokemon_bingo.core.timeutils import UTCDateTime


class User(BaseModel):
    id: str = Field(..., alias="_id")
    username: str
    display_name: Optional[str] = None

    avatar_url: Optional[str] = None
    hex_code: Optional[str] = None  # Color de marca del usuario
    twitch_url: Optional[str] = None

    created_at: UTCDateTime

    is_moderator: bool = False
    # Solo para moderadores: desplaza "hoy" N días para previsualizar meses
    testing_day_offset: int = 0

    class Config:
        populate_by_name = True

    @property
    def name(self) -> str:
        return self.display_name or self.username

    @property
    def day_offset(self) -> int:
        """Offset efectivo: solo los moderadores viajan en el tiempo."""
        return self.testing_day_offset if self.is_moderator else 0


class UserResponse(BaseModel):
    id: str
    username: str
    display_name: str
    avatar_url: Optional[str] = None
    hex_code: Optional[str] = None
    created_at: UTCDateTime
    is_moderator: bool = False
