from .user import User
from .month import Month
from .pokemon import Pokemon, PoolSlot
from .entry import Entry
from .approval import Approval, ProofFile
from .points import UserMonthlyPoints, BingoAchievement
from .ambassador import Ambassador
from .board import BoardCell
from .leaderboard import LeaderboardEntry

__all__ = [
    "User",
    "Month",
    "Pokemon",
    "PoolSlot",
    "Entry",
    "Approval",
    "ProofFile",
    "UserMonthlyPoints",
    "BingoAchievement",
    "Ambassador",
    "BoardCell",
    "LeaderboardEntry",
]
