from typing import Optional
from pydantic import BaseModel

from pokemon_bingo.core.timeutils import UTCDateTime


class Approval(BaseModel):
    """Captura enviada por un usuario, pendiente de revisión de un moderador"""

    id: str

    user_id: str
    pokemon_id: int
    month_id: int

    proof_url: str
    proof_url2: Optional[str] = None

    status: str = "pending"  # pending (las transiciones las hace tooling externo)
    notes: Optional[str] = None

    created_at: UTCDateTime

    class Config:
        populate_by_name = True


class ProofFile(BaseModel):
    """Archivo de prueba ya leído del multipart"""

    filename: str
    content_type: str = "application/octet-stream"
    data: bytes
