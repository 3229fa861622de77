"""
Controlador de salud - Ping del backend del bingo

Lo usan el frontend y el monitoreo del hosting para saber si la API responde
y si ya tiene la conexión a MongoDB abierta (se abre en el lifespan).
"""

from fastapi import APIRouter
from pydantic import BaseModel

from pokemon_bingo.database import Database


router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Estado del backend: {status, message, database}"""
    status: str
    message: str
    database: str  # "connected" | "disconnected"


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Ping sin autenticación.

    No consulta ninguna colección: solo mira si el singleton de Database
    tiene una base asignada.
    """
    db_status = "connected" if Database.db is not None else "disconnected"

    return HealthResponse(
        status="ok",
        message="Pokemon Bingo API is running",
        database=db_status
    )
