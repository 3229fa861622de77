from typing import Optional
from pydantic import BaseModel


class BoardCell(BaseModel):
    """Casilla del tablero tal como la ve un usuario"""

    id: str  # month_id:position
    position: int

    pokemon_id: Optional[int] = None
    national_dex_id: Optional[int] = None
    pokemon_name: str
    pokemon_gif: Optional[str] = None

    is_checked: bool = False
    is_free_space: bool = False
    is_empty: bool = False
