"""
Audit router — read and clear the AI interaction audit trail.

Entries contain message hashes and model output previews only.
"""

from fastapi import APIRouter, Depends, Request, status

from caretaker.models.safety import AuditEntry, AuditStats
from caretaker.services.audit import AuditLog

router = APIRouter(prefix="/audit", tags=["audit"])


def get_audit_log(request: Request) -> AuditLog:
    return request.app.state.audit_log


@router.get("", response_model=list[AuditEntry])
async def list_entries(audit_log: AuditLog = Depends(get_audit_log)) -> list[AuditEntry]:
    return audit_log.list()


@router.get("/stats", response_model=AuditStats)
async def audit_stats(audit_log: AuditLog = Depends(get_audit_log)) -> AuditStats:
    return audit_log.stats()


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_entries(audit_log: AuditLog = Depends(get_audit_log)) -> None:
    audit_log.clear()
