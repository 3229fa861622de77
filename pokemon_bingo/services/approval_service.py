"""
ApprovalService - Catch proof submission and the moderator review queue.

A submission carries either one external URL or exactly two uploaded files.
Files are stored in S3 first; the pending approval is inserted only after
every upload succeeded.
"""

import logging
import uuid
from datetime import datetime
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel

from pokemon_bingo.core.timeutils import utcnow
from pokemon_bingo.models.approval import Approval, ProofFile
from pokemon_bingo.repositories.approval_repository import ApprovalRepository
from pokemon_bingo.repositories.entry_repository import EntryRepository
from pokemon_bingo.repositories.pokemon_repository import PokemonRepository
from pokemon_bingo.repositories.user_repository import UserRepository
from pokemon_bingo.services.period_service import PeriodService
from pokemon_bingo.services.s3_service import S3ServiceError, get_s3_service

logger = logging.getLogger(__name__)

PROOF_MODE_URL = "url"
PROOF_MODE_FILES = "files"


class ApprovalServiceError(Exception):
    """Base exception for approval service errors."""
    pass


class InvalidSubmissionError(ApprovalServiceError):
    """Raised when the submission form is incomplete or contradictory."""
    pass


class ProofStorageError(ApprovalServiceError):
    """Raised when a proof file could not be stored."""
    pass


class PendingApproval(BaseModel):
    """Pending approval joined with submitter and Pokémon display data."""
    id: str
    user_id: str
    display_name: str
    pokemon_id: int
    pokemon_name: Optional[str] = None
    pokemon_img: Optional[str] = None
    national_dex_id: Optional[int] = None
    month_id: int
    proof_url: str
    proof_url2: Optional[str] = None
    created_at: datetime


def validate_proof(
    pokemon_id: Optional[int],
    url: Optional[str],
    files: list[ProofFile]
) -> str:
    """
    Check the submission shape and return the proof mode ("url" or "files").

    Rules:
    - pokemon_id is required
    - exactly one mode: a URL, or both files
    - a single file without its pair is rejected
    - a URL together with files is rejected
    """
    if pokemon_id is None:
        raise InvalidSubmissionError("pokemon_id is required")

    has_url = bool(url and url.strip())

    if has_url and files:
        raise InvalidSubmissionError("Provide either a URL or two files, not both")

    if has_url:
        return PROOF_MODE_URL

    if len(files) == 2:
        return PROOF_MODE_FILES

    if len(files) == 1:
        raise InvalidSubmissionError("Two proof files are required; only one was uploaded")

    if files:
        raise InvalidSubmissionError("Exactly two proof files are allowed")

    raise InvalidSubmissionError("A proof URL or two proof files are required")


class ApprovalService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.approval_repo = ApprovalRepository(db)
        self.entry_repo = EntryRepository(db)
        self.pokemon_repo = PokemonRepository(db)
        self.user_repo = UserRepository(db)
        self.period_service = PeriodService(db)

    async def _check_submittable(self, user_id: str, pokemon_id: int, month_id: int) -> None:
        """
        Same rules as /upload/available-pokemon: the Pokémon must exist, be
        shiny-eligible, sit in the month's pool and not be caught yet this month.
        """
        pokemon = await self.pokemon_repo.get_by_id(pokemon_id)
        if pokemon is None:
            raise InvalidSubmissionError(f"Pokemon {pokemon_id} not found")

        if not pokemon.shiny_available:
            raise InvalidSubmissionError(f"Pokemon {pokemon_id} has no shiny form")

        pool = await self.pokemon_repo.get_pool(month_id)
        if pokemon_id not in {slot.pokemon_id for slot in pool}:
            raise InvalidSubmissionError(f"Pokemon {pokemon_id} is not on this month's board")

        entries = await self.entry_repo.get_user_entries_for_month(user_id, month_id)
        if pokemon_id in {e.pokemon_id for e in entries}:
            raise InvalidSubmissionError(f"Pokemon {pokemon_id} is already caught this month")

    async def _store_files(
        self,
        user_id: str,
        pokemon_id: int,
        files: list[ProofFile],
        now: datetime
    ) -> list[str]:
        """
        Upload every proof file. If one fails, the ones already stored are
        deleted before raising ProofStorageError.
        """
        s3_service = get_s3_service()
        timestamp_ms = int(now.timestamp() * 1000)

        keys = []
        urls = []
        try:
            for proof in files:
                key = s3_service.generate_proof_key(user_id, pokemon_id, proof.filename, timestamp_ms)
                url = await s3_service.upload_proof(
                    key,
                    proof.data,
                    content_type=proof.content_type,
                    metadata={"user_id": user_id, "pokemon_id": str(pokemon_id)},
                )
                keys.append(key)
                urls.append(url)
        except (S3ServiceError, BotoCoreError, ClientError) as e:
            logger.error(f"Proof upload failed for user {user_id}: {e.__class__.__name__}")
            await self._discard_uploads(s3_service, keys)
            raise ProofStorageError(str(e)) from e

        return urls

    @staticmethod
    async def _discard_uploads(s3_service, keys: list[str]) -> None:
        for key in keys:
            try:
                await s3_service.delete_proof(key)
            except (S3ServiceError, BotoCoreError, ClientError) as e:
                # Left orphaned in the bucket; the key is in this warning
                logger.warning(f"Could not delete orphaned proof {key}: {e.__class__.__name__}")

    async def submit(
        self,
        user_id: str,
        pokemon_id: Optional[int],
        url: Optional[str] = None,
        files: Optional[list[ProofFile]] = None,
        now: Optional[datetime] = None
    ) -> Approval:
        """
        Create a pending approval for the active month.

        Raises:
            InvalidSubmissionError: bad form, or a Pokémon that is not submittable
            NoActiveMonthError: no month is active right now
            ProofStorageError: a file could not be stored
        """
        files = files or []
        mode = validate_proof(pokemon_id, url, files)
        now = now or utcnow()

        # Plain submissions never use the moderator testing offset
        month = await self.period_service.get_active_month(0, now)

        await self._check_submittable(user_id, pokemon_id, month.id)

        if mode == PROOF_MODE_FILES:
            proof_url, proof_url2 = await self._store_files(user_id, pokemon_id, files, now)
        else:
            proof_url, proof_url2 = url.strip(), None

        approval = Approval(
            id=uuid.uuid4().hex,
            user_id=user_id,
            pokemon_id=pokemon_id,
            month_id=month.id,
            proof_url=proof_url,
            proof_url2=proof_url2,
            status="pending",
            created_at=now,
        )
        created = await self.approval_repo.create(approval)
        logger.info(f"Approval {created.id} created: user={user_id} pokemon={pokemon_id} month={month.id}")
        return created

    async def get_pending(self) -> list[PendingApproval]:
        """Pending approvals, oldest first, with display data joined in."""
        approvals = await self.approval_repo.get_pending()

        users = await self.user_repo.get_by_ids(list({a.user_id for a in approvals}))
        pokemon = await self.pokemon_repo.get_by_ids(list({a.pokemon_id for a in approvals}))

        result = []
        for a in approvals:
            user = users.get(a.user_id)
            poke = pokemon.get(a.pokemon_id)
            result.append(PendingApproval(
                id=a.id,
                user_id=a.user_id,
                display_name=user.name if user else "Unknown",
                pokemon_id=a.pokemon_id,
                pokemon_name=poke.label if poke else None,
                pokemon_img=poke.image if poke else None,
                national_dex_id=poke.national_dex_id if poke else None,
                month_id=a.month_id,
                proof_url=a.proof_url,
                proof_url2=a.proof_url2,
                created_at=a.created_at,
            ))

        return result
