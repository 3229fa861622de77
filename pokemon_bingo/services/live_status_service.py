"""
Servicio de estado en vivo (Twitch Helix)

Consulta si los canales de Twitch de los usuarios/embajadores están en vivo
y cuántos espectadores tienen. Es un enriquecimiento "best-effort": los
llamadores atrapan LiveStatusError y muestran a todos offline.
"""

import logging
import re
import time
from typing import Optional

import httpx
from pydantic import BaseModel

from pokemon_bingo.core.config import get_settings

logger = logging.getLogger(__name__)

TWITCH_TOKEN_URL = "https://id.twitch.tv/oauth2/token"
TWITCH_STREAMS_URL = "https://api.twitch.tv/helix/streams"

# Helix acepta hasta 100 user_login por request
MAX_LOGINS_PER_REQUEST = 100

_TWITCH_LOGIN_RE = re.compile(r"^(?:https?://)?(?:www\.|m\.)?twitch\.tv/([A-Za-z0-9_]+)", re.IGNORECASE)


class LiveStatusError(Exception):
    """Falló la consulta de estado en vivo"""
    pass


class LiveStatusNotConfiguredError(LiveStatusError):
    """Faltan TWITCH_CLIENT_ID / TWITCH_CLIENT_SECRET"""
    pass


class LiveStatus(BaseModel):
    is_live: bool = False
    viewer_count: Optional[int] = None


OFFLINE = LiveStatus()


def twitch_login_from_url(url: Optional[str]) -> Optional[str]:
    """
    Extrae el login de una URL de canal

    "https://www.twitch.tv/SomeStreamer" -> "somestreamer"
    """
    if not url:
        return None
    match = _TWITCH_LOGIN_RE.match(url.strip())
    return match.group(1).lower() if match else None


class LiveStatusService:
    def __init__(self):
        self.settings = get_settings()
        self._token: Optional[str] = None
        self._token_expires_at: float = 0.0

    @property
    def is_configured(self) -> bool:
        return bool(self.settings.twitch_client_id and self.settings.twitch_client_secret)

    async def _get_app_token(self, client: httpx.AsyncClient) -> str:
        """
        Token de aplicación (client credentials), cacheado hasta un minuto
        antes de que expire.
        """
        if self._token and time.monotonic() < self._token_expires_at:
            return self._token

        response = await client.post(
            TWITCH_TOKEN_URL,
            data={
                "client_id": self.settings.twitch_client_id,
                "client_secret": self.settings.twitch_client_secret,
                "grant_type": "client_credentials",
            },
        )
        if response.status_code != 200:
            raise LiveStatusError(f"Twitch token request failed. Status: {response.status_code}")

        data = response.json()
        self._token = data["access_token"]
        self._token_expires_at = time.monotonic() + max(int(data.get("expires_in", 0)) - 60, 0)
        return self._token

    async def get_statuses(self, logins: list[str]) -> dict[str, LiveStatus]:
        """
        Estado de cada login. Los que no aparecen en la respuesta están offline.

        Raises:
            LiveStatusNotConfiguredError: sin credenciales de Twitch
            LiveStatusError: cualquier fallo HTTP o respuesta inválida
        """
        unique = sorted({login.lower() for login in logins if login})
        if not unique:
            return {}

        if not self.is_configured:
            raise LiveStatusNotConfiguredError("Twitch credentials are not configured")

        statuses = {login: OFFLINE for login in unique}

        try:
            async with httpx.AsyncClient(timeout=self.settings.twitch_timeout_seconds) as client:
                token = await self._get_app_token(client)
                headers = {
                    "Client-Id": self.settings.twitch_client_id,
                    "Authorization": f"Bearer {token}",
                }

                for start in range(0, len(unique), MAX_LOGINS_PER_REQUEST):
                    chunk = unique[start:start + MAX_LOGINS_PER_REQUEST]
                    response = await client.get(
                        TWITCH_STREAMS_URL,
                        params=[("user_login", login) for login in chunk],
                        headers=headers,
                    )

                    if response.status_code == 401:
                        # Token revocado: se pide otro en la próxima llamada
                        self._token = None
                    if response.status_code != 200:
                        raise LiveStatusError(f"Twitch streams request failed. Status: {response.status_code}")

                    for stream in response.json().get("data", []):
                        if stream.get("type") != "live":
                            continue
                        login = (stream.get("user_login") or "").lower()
                        statuses[login] = LiveStatus(
                            is_live=True,
                            viewer_count=stream.get("viewer_count", 0),
                        )
        except httpx.HTTPError as e:
            raise LiveStatusError(f"Twitch request error: {e.__class__.__name__}") from e
        except (KeyError, ValueError) as e:
            raise LiveStatusError("Unexpected Twitch response") from e

        logger.debug(f"Live status: {sum(s.is_live for s in statuses.values())}/{len(statuses)} live")
        return statuses


# Instancia singleton (comparte el token de aplicación entre requests)
_live_status_service_instance: Optional[LiveStatusService] = None


def get_live_status_service() -> LiveStatusService:
    global _live_status_service_instance
    if _live_status_service_instance is None:
        _live_status_service_instance = LiveStatusService()
    return _live_status_service_instance
