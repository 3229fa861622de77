from typing import Optional
from pydantic import BaseModel


class Pokemon(BaseModel):
    """Datos estáticos de un Pokémon (tabla maestra)"""

    id: int
    national_dex_id: int
    name: str
    display_name: Optional[str] = None

    img_url: Optional[str] = None
    gif_url: Optional[str] = None

    shiny_available: bool = True

    class Config:
        populate_by_name = True

    @property
    def label(self) -> str:
        return self.display_name or self.name

    @property
    def image(self) -> Optional[str]:
        return self.gif_url or self.img_url


class PoolSlot(BaseModel):
    """Posición del tablero (1-25) asignada a un Pokémon en un mes"""

    month_id: int
    position: int
    pokemon_id: int

    class Config:
        populate_by_name = True
