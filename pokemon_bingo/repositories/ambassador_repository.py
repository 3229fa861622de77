"""
AmbassadorRepository - perfiles de streamers embajadores
"""

from motor.motor_asyncio import AsyncIOMotorDatabase

from pokemon_bingo.models.ambassador import Ambassador


class AmbassadorRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["ambassadors"]

    async def get_all(self) -> list[Ambassador]:
        cursor = self.collection.find({}).sort([("display_order", 1), ("display_name", 1)])
        docs = await cursor.to_list(length=None)
        return [Ambassador(**doc) for doc in docs]
