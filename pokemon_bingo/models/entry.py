from pydantic import BaseModel

from pokemon_bingo.core.timeutils import UTCDateTime


class Entry(BaseModel):
    """Captura confirmada de un usuario en un mes"""

    id: str
    user_id: str
    month_id: int
    pokemon_id: int

    created_at: UTCDateTime

    class Config:
        populate_by_name = True
