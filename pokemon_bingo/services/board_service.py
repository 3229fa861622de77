"""
BoardService - Builds the 5x5 bingo board for a month.

The board is always 25 cells. Position 13 is the free space; every other
position either shows its pool Pokémon or an empty placeholder.
"""

from typing import Iterable, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from pokemon_bingo.models.board import BoardCell
from pokemon_bingo.models.pokemon import Pokemon, PoolSlot
from pokemon_bingo.repositories.entry_repository import EntryRepository
from pokemon_bingo.repositories.pokemon_repository import PokemonRepository

BOARD_SIZE = 25
FREE_SPACE_POSITION = 13

FREE_SPACE_LABEL = "FREE SPACE"
EMPTY_LABEL = "Empty"


def assemble_board(
    month_id: int,
    pool: Iterable[PoolSlot],
    pokemon_by_id: dict[int, Pokemon],
    caught_ids: Optional[set[int]] = None
) -> list[BoardCell]:
    """
    Merge the fixed layout with a month's pool and a user's catches.

    Pure function: same inputs, same board. Slots outside 1..25 and any
    binding on the free space are ignored.
    """
    caught_ids = caught_ids or set()
    by_position = {
        slot.position: slot.pokemon_id
        for slot in pool
        if 1 <= slot.position <= BOARD_SIZE and slot.position != FREE_SPACE_POSITION
    }

    board = []
    for position in range(1, BOARD_SIZE + 1):
        cell_id = f"{month_id}:{position}"

        if position == FREE_SPACE_POSITION:
            board.append(BoardCell(
                id=cell_id,
                position=position,
                pokemon_name=FREE_SPACE_LABEL,
                is_checked=True,
                is_free_space=True,
            ))
            continue

        pokemon = pokemon_by_id.get(by_position.get(position))
        if pokemon is None:
            board.append(BoardCell(
                id=cell_id,
                position=position,
                pokemon_name=EMPTY_LABEL,
                is_empty=True,
            ))
            continue

        board.append(BoardCell(
            id=cell_id,
            position=position,
            pokemon_id=pokemon.id,
            national_dex_id=pokemon.national_dex_id,
            pokemon_name=pokemon.label,
            pokemon_gif=pokemon.image,
            is_checked=pokemon.id in caught_ids,
        ))

    return board


class BoardService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.pokemon_repo = PokemonRepository(db)
        self.entry_repo = EntryRepository(db)

    async def get_caught_ids(self, user_id: str, month_id: int) -> set[int]:
        entries = await self.entry_repo.get_user_entries_for_month(user_id, month_id)
        return {e.pokemon_id for e in entries}

    async def get_board(
        self,
        month_id: int,
        user_id: Optional[str] = None
    ) -> list[BoardCell]:
        """
        Board for a month, checked for the given user (all unchecked without one).

        Any read failure propagates; a partial board is never returned.
        """
        pool = await self.pokemon_repo.get_pool(month_id)
        pokemon_by_id = await self.pokemon_repo.get_shiny_by_ids(
            [slot.pokemon_id for slot in pool]
        )

        caught_ids: set[int] = set()
        if user_id:
            caught_ids = await self.get_caught_ids(user_id, month_id)

        return assemble_board(month_id, pool, pokemon_by_id, caught_ids)
