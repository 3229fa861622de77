"""
PointsRepository - puntos mensuales y logros de bingo

Ambas colecciones se mantienen fuera de la API; aquí solo se leen.
"""

from typing import Optional
from motor.motor_asyncio import AsyncIOMotorDatabase

from pokemon_bingo.models.points import UserMonthlyPoints, BingoAchievement


class PointsRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["user_monthly_points"]
        self.achievements = db["bingo_achievements"]

    # ============================================
    # 📌 PUNTOS
    # ============================================

    async def get_for_month(self, month_id: int) -> list[UserMonthlyPoints]:
        """Filas de un mes, en orden de inserción"""
        cursor = self.collection.find({"month_id": month_id})
        docs = await cursor.to_list(length=None)
        return [UserMonthlyPoints(**doc) for doc in docs]

    async def get_all(self) -> list[UserMonthlyPoints]:
        cursor = self.collection.find({})
        docs = await cursor.to_list(length=None)
        return [UserMonthlyPoints(**doc) for doc in docs]

    async def get_for_user(self, user_id: str) -> list[UserMonthlyPoints]:
        cursor = self.collection.find({"user_id": user_id})
        docs = await cursor.to_list(length=None)
        return [UserMonthlyPoints(**doc) for doc in docs]

    async def get_for_users(self, user_ids: list[str]) -> list[UserMonthlyPoints]:
        if not user_ids:
            return []

        cursor = self.collection.find({"user_id": {"$in": list(user_ids)}})
        docs = await cursor.to_list(length=None)
        return [UserMonthlyPoints(**doc) for doc in docs]

    # ============================================
    # 📌 LOGROS
    # ============================================

    async def get_achievements(
        self,
        user_ids: Optional[list[str]] = None,
        month_id: Optional[int] = None
    ) -> list[BingoAchievement]:
        """Logros filtrados por usuarios y/o mes (sin filtros: todos)"""
        query: dict = {}
        if user_ids is not None:
            query["user_id"] = {"$in": list(user_ids)}
        if month_id is not None:
            query["month_id"] = month_id

        cursor = self.achievements.find(query)
        docs = await cursor.to_list(length=None)
        return [BingoAchievement(**doc) for doc in docs]
