"""
Dependencies de FastAPI para autenticacion e inyeccion de BD

Hay dos niveles de autenticacion:
- opcional: cualquier problema con el token degrada a la vista anonima
- requerida: los mismos problemas devuelven 401
"""

import logging
from typing import Annotated, Optional, Union

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel

from pokemon_bingo.core.security import decode_access_token
from pokemon_bingo.database import get_database
from pokemon_bingo.models.month import Month
from pokemon_bingo.models.user import User
from pokemon_bingo.repositories.user_repository import UserRepository
from pokemon_bingo.services.period_service import NoActiveMonthError, PeriodService

logger = logging.getLogger(__name__)

# Esquema de seguridad: "Authorization: Bearer <token>", sin error si falta
security = HTTPBearer(auto_error=False)


class Anonymous(BaseModel):
    """Visitante sin token (o con un token que no sirve)."""
    is_authenticated: bool = False

    @property
    def user_id(self) -> Optional[str]:
        return None

    @property
    def day_offset(self) -> int:
        return 0

    @property
    def is_moderator(self) -> bool:
        return False


class Authenticated(BaseModel):
    """Usuario con token valido y registro existente."""
    user: User
    is_authenticated: bool = True

    @property
    def user_id(self) -> Optional[str]:
        return self.user.id

    @property
    def day_offset(self) -> int:
        return self.user.day_offset

    @property
    def is_moderator(self) -> bool:
        return self.user.is_moderator


Identity = Union[Anonymous, Authenticated]


async def _resolve_user(
    credentials: Optional[HTTPAuthorizationCredentials],
    db: AsyncIOMotorDatabase
) -> Optional[User]:
    """Token -> usuario, o None si falta el token, es invalido o el usuario no existe"""
    if credentials is None:
        return None

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        return None

    user_id = payload.get("sub")
    if not user_id:
        logger.debug("Token sin 'sub', se ignora")
        return None

    return await UserRepository(db).get_by_id(user_id)


async def get_identity(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)]
) -> Identity:
    """
    Dependency de autenticacion opcional.

    Nunca falla por el token: sin usuario valido devuelve Anonymous.
    """
    user = await _resolve_user(credentials, db)
    if user is None:
        return Anonymous()
    return Authenticated(user=user)


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)]
) -> User:
    """
    Dependency que exige un usuario autenticado.

    Token ausente, invalido, expirado o de un usuario inexistente -> 401.
    """
    user = await _resolve_user(credentials, db)

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return user


async def get_current_moderator(
    user: Annotated[User, Depends(get_current_user)]
) -> User:
    """Como get_current_user, pero solo para moderadores (403 si no lo es)"""
    if not user.is_moderator:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Moderator access required",
        )
    return user


# Alias de tipos para que se vea mas limpio en los endpoints
OptionalIdentity = Annotated[Identity, Depends(get_identity)]
CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentModerator = Annotated[User, Depends(get_current_moderator)]
Database = Annotated[AsyncIOMotorDatabase, Depends(get_database)]


async def get_active_month(
    identity: Annotated[Identity, Depends(get_identity)],
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)]
) -> Month:
    """
    Mes activo para quien hace el request.

    Solo un moderador autenticado desplaza la fecha con su testing_day_offset.
    Sin mes activo -> 404.
    """
    try:
        return await PeriodService(db).get_active_month(identity.day_offset)
    except NoActiveMonthError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )


ActiveMonth = Annotated[Month, Depends(get_active_month)]
