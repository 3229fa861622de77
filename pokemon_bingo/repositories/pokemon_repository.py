"""
🎯 PokemonRepository - tabla maestra de Pokémon y pool mensual del tablero
"""

from typing import Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from pokemon_bingo.models.pokemon import Pokemon, PoolSlot


class PokemonRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["pokemon_master"]
        self.pool = db["monthly_pokemon_pool"]

    # ============================================
    # 📌 MASTER
    # ============================================

    async def get_by_id(self, pokemon_id: int) -> Optional[Pokemon]:
        doc = await self.collection.find_one({"id": pokemon_id})
        return Pokemon(**doc) if doc else None

    async def get_by_ids(self, pokemon_ids: list[int]) -> dict[int, Pokemon]:
        """Manual join helper: Pokémon indexados por id (shiny o no)"""
        if not pokemon_ids:
            return {}

        cursor = self.collection.find({"id": {"$in": list(pokemon_ids)}})
        docs = await cursor.to_list(length=None)
        return {doc["id"]: Pokemon(**doc) for doc in docs}

    async def get_shiny_by_ids(self, pokemon_ids: list[int]) -> dict[int, Pokemon]:
        """Pokémon con shiny disponible, indexados por id"""
        if not pokemon_ids:
            return {}

        cursor = self.collection.find({
            "id": {"$in": list(pokemon_ids)},
            "shiny_available": True
        })
        docs = await cursor.to_list(length=None)
        return {doc["id"]: Pokemon(**doc) for doc in docs}

    async def get_all_shiny(self) -> list[Pokemon]:
        """Catálogo completo de shinies, ordenado por número de Pokédex"""
        cursor = self.collection.find({"shiny_available": True}).sort("national_dex_id", 1)
        docs = await cursor.to_list(length=None)
        return [Pokemon(**doc) for doc in docs]

    async def count_shiny(self) -> int:
        return await self.collection.count_documents({"shiny_available": True})

    # ============================================
    # 📌 POOL MENSUAL
    # ============================================

    async def get_pool(self, month_id: int) -> list[PoolSlot]:
        """Posiciones asignadas del mes, ordenadas por posición"""
        cursor = self.pool.find({"month_id": month_id}).sort("position", 1)
        docs = await cursor.to_list(length=None)
        return [PoolSlot(**doc) for doc in docs]
