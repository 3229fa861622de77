"""
Helpers de fechas: todo se maneja en UTC aware
"""

from datetime import datetime, timezone
from typing import Annotated, Optional

from pydantic import AfterValidator


def as_utc(val: Optional[datetime]) -> Optional[datetime]:
    """
    Normaliza un datetime a UTC aware.

    MongoDB devuelve datetimes naive (en UTC); los tratamos siempre como UTC.
    """
    if val is None:
        return None
    if val.tzinfo is None:
        return val.replace(tzinfo=timezone.utc)
    return val.astimezone(timezone.utc)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# Tipo para los modelos: cualquier datetime que entra queda en UTC aware
UTCDateTime = Annotated[datetime, AfterValidator(as_utc)]
