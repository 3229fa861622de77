"""
Pytest fixtures and configuration for all tests.
"""

import os

# Settings are read on first import; tests must never hit Twitch or a real cluster
os.environ.update({
    "MONGODB_URI": "mongodb://localhost:27017",
    "JWT_SECRET": "test-secret-key-at-least-32-chars-long",
    "JWT_AUDIENCE": "authenticated",
    "TWITCH_CLIENT_ID": "",
    "TWITCH_CLIENT_SECRET": "",
    "STORAGE_MODE": "s3",
})

import pytest
from typing import AsyncGenerator
from datetime import datetime, timedelta, timezone

from mongomock_motor import AsyncMongoMockClient
from motor.motor_asyncio import AsyncIOMotorDatabase

TEST_DB_NAME = "pokemon_bingo_test"

ACTIVE_MONTH_ID = 2
PAST_MONTH_ID = 1


def day(offset: int) -> datetime:
    """Midnight UTC, `offset` days from today."""
    today = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    return today + timedelta(days=offset)


@pytest.fixture(scope="function")
async def test_db() -> AsyncGenerator[AsyncIOMotorDatabase, None]:
    """
    Provide a clean in-memory database for each test.

    mongomock-motor exposes the same async API as motor, so repositories run
    unchanged against it.
    """
    client = AsyncMongoMockClient()
    db = client[TEST_DB_NAME]

    yield db

    # Cleanup: drop all collections after test
    collection_names = await db.list_collection_names()
    for collection_name in collection_names:
        await db[collection_name].drop()


@pytest.fixture
def sample_months_data():
    """A finished month followed by the one running today."""
    return [
        {
            "id": PAST_MONTH_ID,
            "month_year_display": "Past Month",
            "start_date": day(-40),
            "end_date": day(-10) - timedelta(seconds=1),
        },
        {
            "id": ACTIVE_MONTH_ID,
            "month_year_display": "Current Month",
            "start_date": day(-10),
            "end_date": day(20) - timedelta(seconds=1),
        },
    ]


@pytest.fixture
def sample_pokemon_data():
    """
    Shiny-eligible Pokémon 1-22 (pool), 50 (shiny, never pooled) and
    99 (no shiny, pooled by mistake).
    """
    pokemon = [
        {
            "id": i,
            "national_dex_id": 100 + i,
            "name": f"pokemon-{i}",
            "display_name": f"Pokemon {i}",
            "img_url": f"https://img.test/{i}.png",
            "gif_url": f"https://img.test/{i}.gif",
            "shiny_available": True,
        }
        for i in range(1, 23)
    ]
    pokemon.append({
        "id": 50,
        "national_dex_id": 1,
        "name": "bulbasaur",
        "display_name": "Bulbasaur",
        "img_url": "https://img.test/50.png",
        "gif_url": None,
        "shiny_available": True,
    })
    pokemon.append({
        "id": 99,
        "national_dex_id": 999,
        "name": "no-shiny",
        "display_name": None,
        "img_url": None,
        "gif_url": None,
        "shiny_available": False,
    })
    return pokemon


@pytest.fixture
def sample_pool_data():
    """
    Active month pool: 1-12 -> Pokémon 1-12, 14-23 -> Pokémon 13-22,
    24 -> Pokémon 99 (no shiny), 25 unbound.
    """
    positions = [p for p in range(1, 24) if p != 13]
    pool = [
        {"month_id": ACTIVE_MONTH_ID, "position": position, "pokemon_id": pokemon_id}
        for position, pokemon_id in zip(positions, range(1, 23))
    ]
    pool.append({"month_id": ACTIVE_MONTH_ID, "position": 24, "pokemon_id": 99})
    pool.append({"month_id": PAST_MONTH_ID, "position": 1, "pokemon_id": 5})
    return pool


@pytest.fixture
def sample_users_data():
    return [
        {
            "_id": "user-ash",
            "username": "ash",
            "display_name": "Ash",
            "avatar_url": "https://img.test/ash.png",
            "hex_code": "#ff0000",
            "twitch_url": "https://twitch.tv/Ash",
            "created_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
            "is_moderator": False,
            "testing_day_offset": 30,
        },
        {
            "_id": "user-misty",
            "username": "misty",
            "display_name": None,
            "avatar_url": None,
            "hex_code": None,
            "twitch_url": None,
            "created_at": datetime(2024, 2, 1, tzinfo=timezone.utc),
            "is_moderator": False,
            "testing_day_offset": 0,
        },
        {
            "_id": "user-oak",
            "username": "oak",
            "display_name": "Professor Oak",
            "avatar_url": None,
            "hex_code": "#00ff00",
            "twitch_url": None,
            "created_at": datetime(2023, 12, 1, tzinfo=timezone.utc),
            "is_moderator": True,
            "testing_day_offset": 0,
        },
    ]


@pytest.fixture
def sample_entries_data():
    return [
        {"id": "e1", "user_id": "user-ash", "month_id": ACTIVE_MONTH_ID, "pokemon_id": 1,
         "created_at": day(-5)},
        {"id": "e2", "user_id": "user-ash", "month_id": ACTIVE_MONTH_ID, "pokemon_id": 2,
         "created_at": day(-4)},
        {"id": "e3", "user_id": "user-ash", "month_id": PAST_MONTH_ID, "pokemon_id": 5,
         "created_at": day(-30)},
        {"id": "e4", "user_id": "user-misty", "month_id": ACTIVE_MONTH_ID, "pokemon_id": 1,
         "created_at": day(-2)},
    ]


@pytest.fixture
def sample_points_data():
    """
    Past month: misty 50, ash 30. Current month: ash 40, misty 40 (tie).
    All-time: misty 90, ash 70.
    """
    return [
        {"id": "p1", "user_id": "user-ash", "month_id": PAST_MONTH_ID, "points": 30, "bingos_completed": 0},
        {"id": "p2", "user_id": "user-misty", "month_id": PAST_MONTH_ID, "points": 50, "bingos_completed": 2},
        {"id": "p3", "user_id": "user-misty", "month_id": ACTIVE_MONTH_ID, "points": 40, "bingos_completed": 0},
        {"id": "p4", "user_id": "user-ash", "month_id": ACTIVE_MONTH_ID, "points": 40, "bingos_completed": 1},
    ]


@pytest.fixture
def sample_achievements_data():
    return [
        {"user_id": "user-ash", "month_id": ACTIVE_MONTH_ID, "achievement_type": "row"},
        {"user_id": "user-misty", "month_id": PAST_MONTH_ID, "achievement_type": "row"},
        {"user_id": "user-misty", "month_id": PAST_MONTH_ID, "achievement_type": "blackout"},
    ]


@pytest.fixture
def sample_ambassadors_data():
    return [
        {"id": "amb-2", "display_name": "Zed", "twitch_url": "https://twitch.tv/zed",
         "profile_image_url": None, "brand_color": "#123456", "display_order": 1},
        {"id": "amb-1", "display_name": "Brock", "twitch_url": "https://www.twitch.tv/Brock",
         "profile_image_url": "https://img.test/brock.png", "brand_color": None, "display_order": 1},
        {"id": "amb-3", "display_name": "Alpha", "twitch_url": "https://twitch.tv/alpha",
         "profile_image_url": None, "brand_color": None, "display_order": 0},
    ]


@pytest.fixture
async def seeded_db(
    test_db,
    sample_months_data,
    sample_pokemon_data,
    sample_pool_data,
    sample_users_data,
    sample_entries_data,
    sample_points_data,
    sample_achievements_data,
    sample_ambassadors_data
):
    """Test database loaded with every sample collection."""
    await test_db["months"].insert_many(sample_months_data)
    await test_db["pokemon_master"].insert_many(sample_pokemon_data)
    await test_db["monthly_pokemon_pool"].insert_many(sample_pool_data)
    await test_db["users"].insert_many(sample_users_data)
    await test_db["entries"].insert_many(sample_entries_data)
    await test_db["user_monthly_points"].insert_many(sample_points_data)
    await test_db["bingo_achievements"].insert_many(sample_achievements_data)
    await test_db["ambassadors"].insert_many(sample_ambassadors_data)
    return test_db
