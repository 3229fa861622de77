"""
Controlador de usuario - Datos de la sesión actual
"""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from pokemon_bingo.core.config import get_settings
from pokemon_bingo.core.dependencies import CurrentUser, OptionalIdentity
from pokemon_bingo.models.user import UserResponse


router = APIRouter(prefix="/user", tags=["user"])


class ModeratorStatusResponse(BaseModel):
    is_moderator: bool = Field(alias="isModerator")

    class Config:
        populate_by_name = True


@router.get("/me", response_model=UserResponse)
async def get_me(user: CurrentUser):
    """
    Obtener el usuario autenticado.
    """
    return UserResponse(
        id=user.id,
        username=user.username,
        display_name=user.name,
        avatar_url=user.avatar_url,
        hex_code=user.hex_code or get_settings().default_hex_code,
        created_at=user.created_at,
        is_moderator=user.is_moderator
    )


@router.get("/is-moderator", response_model=ModeratorStatusResponse)
async def is_moderator(identity: OptionalIdentity):
    """
    ¿El usuario actual es moderador? Sin sesión siempre es false.
    """
    return ModeratorStatusResponse(is_moderator=identity.is_moderator)
