"""
AmbassadorService - Promoter profiles with their Twitch live status.
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel

from pokemon_bingo.core.config import get_settings
from pokemon_bingo.repositories.ambassador_repository import AmbassadorRepository
from pokemon_bingo.services.enrichment import fetch_live_statuses, live_status_for


class AmbassadorStatus(BaseModel):
    id: str
    display_name: str
    twitch_url: str
    profile_image_url: Optional[str] = None
    brand_color: str
    is_live: bool = False
    viewer_count: Optional[int] = None


class AmbassadorService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.ambassador_repo = AmbassadorRepository(db)
        self.settings = get_settings()

    async def get_ambassadors(self) -> list[AmbassadorStatus]:
        ambassadors = await self.ambassador_repo.get_all()
        statuses = await fetch_live_statuses(a.twitch_url for a in ambassadors)

        result = []
        for a in ambassadors:
            live = live_status_for(statuses, a.twitch_url)
            result.append(AmbassadorStatus(
                id=a.id,
                display_name=a.display_name,
                twitch_url=a.twitch_url,
                profile_image_url=a.profile_image_url,
                brand_color=a.brand_color or self.settings.default_hex_code,
                is_live=live.is_live,
                viewer_count=live.viewer_count,
            ))

        return result
