"""
🔌 Database Connection Setup - MongoDB

Configuración centralizada para conectar a MongoDB
"""

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from pokemon_bingo.core.config import get_settings

logger = logging.getLogger(__name__)


class Database:
    """Singleton para la conexión a MongoDB"""

    client: Optional[AsyncIOMotorClient] = None
    db: Optional[AsyncIOMotorDatabase] = None

    @classmethod
    async def connect(cls):
        """Conecta a MongoDB"""
        if cls.client is None:
            settings = get_settings()

            cls.client = AsyncIOMotorClient(
                settings.mongodb_uri,
                maxPoolSize=10,
                minPoolSize=2,
                tz_aware=True,
            )
            cls.db = cls.client[settings.mongodb_db_name]

            # Test de conexión
            await cls.client.admin.command("ping")
            logger.info(f"Connected to MongoDB: {settings.mongodb_db_name}")

    @classmethod
    async def disconnect(cls):
        """Cierra la conexión"""
        if cls.client is not None:
            cls.client.close()
            cls.client = None
            cls.db = None
            logger.info("Disconnected from MongoDB")

    @classmethod
    def get_db(cls) -> AsyncIOMotorDatabase:
        """Retorna la instancia de la base de datos"""
        if cls.db is None:
            raise RuntimeError("Database not connected. Call Database.connect() first.")
        return cls.db


# ============================================
# 🎯 DEPENDENCY para FastAPI
# ============================================

async def get_database() -> AsyncIOMotorDatabase:
    """
    FastAPI dependency para inyectar la DB

    Uso:
        @router.get("/pokedex")
        async def get_pokedex(db: Database, user: CurrentUser):
            return await PokedexService(db).get_pokedex(user.id, None)
    """
    return Database.get_db()


# ============================================
# 🏗️ CREAR ÍNDICES (run once al deployment)
# ============================================

async def create_indexes(db: Optional[AsyncIOMotorDatabase] = None):
    """
    Crea los índices que usan las consultas de la API

    Llamar una vez al hacer deploy o en un script de inicialización
    """
    db = db if db is not None else Database.get_db()

    # Meses: resolución del mes activo
    await db.months.create_index([("start_date", 1), ("end_date", 1)])

    # Catálogo y pool mensual
    await db.pokemon_master.create_index("national_dex_id")
    await db.pokemon_master.create_index("shiny_available")
    await db.monthly_pokemon_pool.create_index([("month_id", 1), ("position", 1)], unique=True)

    # Capturas
    await db.entries.create_index([("user_id", 1), ("month_id", 1)])
    await db.entries.create_index([("pokemon_id", 1), ("created_at", -1)])

    # Aprobaciones
    await db.approvals.create_index([("status", 1), ("created_at", 1)])

    # Puntos y logros
    await db.user_monthly_points.create_index([("user_id", 1), ("month_id", 1)], unique=True)
    await db.user_monthly_points.create_index("month_id")
    await db.bingo_achievements.create_index([("user_id", 1), ("month_id", 1)])

    # Usuarios y embajadores
    await db.users.create_index("username")
    await db.ambassadors.create_index([("display_order", 1), ("display_name", 1)])

    logger.info("Indexes created successfully")
