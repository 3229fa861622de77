"""
Controlador de subidas - Envío de capturas para aprobación

Una captura se prueba con un link externo o con dos archivos (multipart).
"""

from typing import Optional

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from pokemon_bingo.core.config import get_settings
from pokemon_bingo.core.dependencies import CurrentUser, Database
from pokemon_bingo.models.approval import Approval, ProofFile
from pokemon_bingo.services.approval_service import (
    ApprovalService,
    InvalidSubmissionError,
    ProofStorageError,
)
from pokemon_bingo.services.period_service import NoActiveMonthError, PeriodService
from pokemon_bingo.services.pokedex_service import AvailablePokemon, PokedexService


router = APIRouter(prefix="/upload", tags=["upload"])


class SubmissionResponse(BaseModel):
    """Resultado de un envío aceptado."""
    success: bool
    approval: Approval


async def _read_upload(upload: Optional[UploadFile], max_bytes: int) -> Optional[ProofFile]:
    """UploadFile -> ProofFile (None si el campo vino vacío, 400 si pesa demasiado)"""
    if upload is None or not upload.filename:
        return None

    # Lee como mucho un byte más del límite para detectar el exceso
    data = await upload.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File {upload.filename} exceeds the {max_bytes} byte limit"
        )

    return ProofFile(
        filename=upload.filename,
        content_type=upload.content_type or "application/octet-stream",
        data=data,
    )


@router.get("/available-pokemon", response_model=list[AvailablePokemon])
async def get_available_pokemon(user: CurrentUser, db: Database):
    """
    Pokémon del mes activo que el usuario todavía puede enviar.

    Usa la fecha real (sin offset), igual que el envío.
    """
    try:
        month = await PeriodService(db).get_active_month(0)
    except NoActiveMonthError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )

    pokedex_service = PokedexService(db)
    return await pokedex_service.get_available(user.id, month)


@router.post("/submission", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
async def submit_catch(
    user: CurrentUser,
    db: Database,
    pokemon_id: Optional[int] = Form(None),
    url: Optional[str] = Form(None),
    file: Optional[UploadFile] = File(None),
    file2: Optional[UploadFile] = File(None)
):
    """
    Enviar una captura para revisión.

    Modos válidos:
    - url: link externo (clip, VOD, imagen)
    - file + file2: dos capturas de pantalla que se suben a S3
    """
    max_bytes = get_settings().max_proof_bytes
    files = [
        f for f in (await _read_upload(file, max_bytes), await _read_upload(file2, max_bytes))
        if f is not None
    ]

    approval_service = ApprovalService(db)

    try:
        approval = await approval_service.submit(user.id, pokemon_id, url=url, files=files)
    except InvalidSubmissionError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except NoActiveMonthError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except ProofStorageError as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to store proof", "details": str(e)}
        )

    return SubmissionResponse(success=True, approval=approval)
