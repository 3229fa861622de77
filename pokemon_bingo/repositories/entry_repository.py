"""
EntryRepository - capturas confirmadas de los usuarios
"""

from motor.motor_asyncio import AsyncIOMotorDatabase

from pokemon_bingo.models.entry import Entry


class EntryRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["entries"]

    async def get_user_entries_for_month(self, user_id: str, month_id: int) -> list[Entry]:
        cursor = self.collection.find({
            "user_id": user_id,
            "month_id": month_id
        }).sort("created_at", 1)

        docs = await cursor.to_list(length=None)
        return [Entry(**doc) for doc in docs]

    async def get_user_entries(self, user_id: str) -> list[Entry]:
        """Todas las capturas del usuario, en todos los meses"""
        cursor = self.collection.find({"user_id": user_id}).sort("created_at", 1)
        docs = await cursor.to_list(length=None)
        return [Entry(**doc) for doc in docs]

    async def get_recent_for_pokemon(self, pokemon_id: int, limit: int = 10) -> list[Entry]:
        """Últimas capturas de un Pokémon, más nuevas primero"""
        cursor = self.collection.find(
            {"pokemon_id": pokemon_id}
        ).sort("created_at", -1).limit(limit)

        docs = await cursor.to_list(length=limit)
        return [Entry(**doc) for doc in docs]
