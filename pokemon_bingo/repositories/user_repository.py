"""
UserRepository - MongoDB access for users collection.
"""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from pokemon_bingo.models.user import User


class UserRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["users"]

    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID (identity provider subject)."""
        doc = await self.collection.find_one({"_id": user_id})
        return User(**doc) if doc else None

    async def get_by_ids(self, user_ids: list[str]) -> dict[str, User]:
        """Manual join helper: users keyed by id."""
        if not user_ids:
            return {}

        cursor = self.collection.find({"_id": {"$in": list(user_ids)}})
        docs = await cursor.to_list(length=None)
        return {doc["_id"]: User(**doc) for doc in docs}
