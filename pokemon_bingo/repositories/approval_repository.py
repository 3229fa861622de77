"""
ApprovalRepository - envíos de capturas pendientes de revisión
"""

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from pokemon_bingo.models.approval import Approval


class ApprovalRepository:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db["approvals"]

    async def create(self, approval: Approval) -> Approval:
        approval_dict = approval.model_dump()

        try:
            await self.collection.insert_one(approval_dict)
            return approval
        except DuplicateKeyError:
            raise ValueError(f"Approval {approval.id} already exists")

    async def get_pending(self) -> list[Approval]:
        """Pendientes, más antiguas primero (orden de revisión)"""
        cursor = self.collection.find({"status": "pending"}).sort("created_at", 1)
        docs = await cursor.to_list(length=None)
        return [Approval(**doc) for doc in docs]
