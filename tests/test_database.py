"""
Tests para la conexión y los índices de MongoDB
"""

import pytest
from pymongo.errors import DuplicateKeyError

from pokemon_bingo.database import Database, create_indexes, get_database


class TestDatabase:

    @pytest.mark.asyncio
    async def test_get_database_requires_connection(self):
        original_db = Database.db
        Database.db = None
        try:
            with pytest.raises(RuntimeError, match="not connected"):
                await get_database()
        finally:
            Database.db = original_db

    @pytest.mark.asyncio
    async def test_get_database_returns_singleton(self, test_db):
        original_db = Database.db
        Database.db = test_db
        try:
            assert await get_database() is test_db
        finally:
            Database.db = original_db


class TestCreateIndexes:

    @pytest.mark.asyncio
    async def test_creates_query_indexes(self, test_db):
        await create_indexes(test_db)

        entries = await test_db.entries.index_information()
        pool = await test_db.monthly_pokemon_pool.index_information()

        assert "pokemon_id_1_created_at_-1" in entries
        assert pool["month_id_1_position_1"]["unique"] is True

    @pytest.mark.asyncio
    async def test_pool_position_is_unique_per_month(self, test_db):
        await create_indexes(test_db)
        await test_db.monthly_pokemon_pool.insert_one({"month_id": 1, "position": 1, "pokemon_id": 5})

        with pytest.raises(DuplicateKeyError):
            await test_db.monthly_pokemon_pool.insert_one({"month_id": 1, "position": 1, "pokemon_id": 6})
