from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..config import settings
from ..core import messages, moderation
from ..core.database import get_db
from ..core.identity import UserIdentity, current_admin
from .schemas import (
    ApproveRequest,
    PendingDefinitionOut,
    PendingDetailOut,
    PendingPageOut,
    StatusMessageOut,
)

router = APIRouter(prefix="/dashboard/definitions", tags=["moderation"])


@router.get("", response_model=PendingPageOut)
def moderation_queue(
    cursor: Optional[str] = Query(None, description="Id of the last definition already seen"),
    admin: UserIdentity = Depends(current_admin),
    db: Session = Depends(get_db),
):
    page = moderation.pending_page(db, cursor, settings.page_size)
    return PendingPageOut(
        data=[PendingDefinitionOut.model_validate(d) for d in page.data],
        has_next_page=page.has_next_page,
        end_cursor=page.end_cursor,
    )


@router.post("", response_model=StatusMessageOut)
def approve(
    payload: ApproveRequest,
    admin: UserIdentity = Depends(current_admin),
    db: Session = Depends(get_db),
):
    if moderation.approve_definition(db, admin, payload.id):
        body = StatusMessageOut(status=True, message=messages.DEFINITION_APPROVED)
        return JSONResponse(status_code=201, content=body.model_dump())

    return StatusMessageOut(status=True, message=messages.DEFINITION_ALREADY_APPROVED)


@router.get("/{definition_id}", response_model=PendingDetailOut)
def definition_detail(
    definition_id: str,
    admin: UserIdentity = Depends(current_admin),
    db: Session = Depends(get_db),
):
    d = moderation.pending_detail(db, definition_id)
    return PendingDetailOut(data=PendingDefinitionOut.model_validate(d))
