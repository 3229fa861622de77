from typing import Optional
from pydantic import BaseModel


class Ambassador(BaseModel):
    """Streamer que promociona el bingo"""

    id: str
    display_name: str
    twitch_url: str

    profile_image_url: Optional[str] = None
    brand_color: Optional[str] = None
    display_order: int = 0

    class Config:
        populate_by_name = True
