"""
📅 MonthRepository - lectura de los meses de bingo

Los meses los crea el tooling de moderadores; aquí solo se leen.
"""

from motor.motor_asyncio import AsyncIOMotorDatabase

from pokemon_bingo.models.month import Month


class MonthRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["months"]

    async def get_all(self) -> list[Month]:
        """Todos los meses ordenados por fecha de inicio"""
        cursor = self.collection.find({}).sort("start_date", 1)
        docs = await cursor.to_list(length=None)
        return [Month(**doc) for doc in docs]
