"""
Seguridad: verificación de los JWT emitidos por el proveedor de identidad
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from pokemon_bingo.core.config import get_settings

logger = logging.getLogger(__name__)


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Crea un JWT con el mismo formato que el proveedor de identidad

    Lo usan los scripts de tooling y los tests; en producción los tokens
    llegan ya firmados desde el frontend.
    """
    settings = get_settings()
    now = datetime.now(timezone.utc)

    payload = {
        "sub": user_id,      # Subject: el usuario
        "exp": now + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes)),
        "iat": now,
    }
    if settings.jwt_audience:
        payload["aud"] = settings.jwt_audience

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Optional[dict]:
    """
    Decodifica y valida un JWT

    Retorna el payload si es válido, None si está expirado o corrupto
    """
    settings = get_settings()
    options = {"verify_aud": bool(settings.jwt_audience)}

    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience or None,
            options=options,
        )
    except JWTError as e:
        logger.debug(f"Token rechazado: {e.__class__.__name__}")
        return None
