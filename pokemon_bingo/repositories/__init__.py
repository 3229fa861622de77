from .user_repository import UserRepository
from .month_repository import MonthRepository
from .pokemon_repository import PokemonRepository
from .entry_repository import EntryRepository
from .approval_repository import ApprovalRepository
from .points_repository import PointsRepository
from .ambassador_repository import AmbassadorRepository

__all__ = [
    "UserRepository",
    "MonthRepository",
    "PokemonRepository",
    "EntryRepository",
    "ApprovalRepository",
    "PointsRepository",
    "AmbassadorRepository",
]
