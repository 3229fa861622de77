from datetime import datetime, time, timedelta

from pydantic import BaseModel

from pokemon_bingo.core.timeutils import UTCDateTime


class Month(BaseModel):
    """
    Mes de bingo: rango de fechas inclusivo en ambos extremos

    end_date puede venir como fecha entera (medianoche, cubre todo ese día)
    o como último segundo del mes (23:59:59, cubre hasta el segundo siguiente).
    """

    id: int
    month_year_display: str  # "January 2025"

    start_date: UTCDateTime
    end_date: UTCDateTime

    class Config:
        populate_by_name = True

    @property
    def end_exclusive(self) -> datetime:
        """Primer instante que ya no pertenece al mes"""
        if self.end_date.timetz().replace(tzinfo=None) == time(0, 0):
            return self.end_date + timedelta(days=1)
        return self.end_date.replace(microsecond=0) + timedelta(seconds=1)

    def contains(self, moment: datetime) -> bool:
        return self.start_date <= moment < self.end_exclusive
