"""
Controlador de aprobaciones - Cola de revisión para moderadores

Aprobar/rechazar lo hace tooling externo; aquí solo se consulta la cola.
"""

from fastapi import APIRouter

from pokemon_bingo.core.dependencies import CurrentModerator, Database
from pokemon_bingo.services.approval_service import ApprovalService, PendingApproval


router = APIRouter(prefix="/approvals", tags=["approvals"])


@router.get("/pending", response_model=list[PendingApproval])
async def get_pending_approvals(moderator: CurrentModerator, db: Database):
    """
    Listar envíos pendientes, más antiguos primero.

    Solo moderadores.
    """
    approval_service = ApprovalService(db)
    return await approval_service.get_pending()
