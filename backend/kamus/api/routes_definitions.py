from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..config import settings
from ..core import definitions, messages
from ..core.aggregation import build_views
from ..core.database import get_db
from ..core.errors import NotFound
from ..core.identity import UserIdentity, current_user_id, optional_identity
from .schemas import (
    DefinitionCreate,
    DefinitionPageOut,
    DefinitionViewOut,
    StatusMessageOut,
)

router = APIRouter(tags=["definitions"])

CURSOR_QUERY = Query(None, description="Id of the last definition already seen")


@router.get("/", response_model=DefinitionPageOut)
def home_feed(
    cursor: Optional[str] = CURSOR_QUERY,
    identity: Optional[UserIdentity] = Depends(optional_identity),
    db: Session = Depends(get_db),
):
    page = definitions.find_visible_page(db, cursor, settings.page_size)
    user_id = identity.id if identity else None
    return DefinitionPageOut.from_page(page.map(lambda rows: build_views(db, rows, user_id)))


@router.get("/my-definitions", response_model=DefinitionPageOut)
def my_definitions(
    cursor: Optional[str] = CURSOR_QUERY,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    page = definitions.find_user_page(db, user_id, cursor, settings.page_size)
    return DefinitionPageOut.from_page(page.map(lambda rows: build_views(db, rows, user_id)))


@router.get("/definitions/{definition_id}", response_model=DefinitionViewOut)
def get_definition(
    definition_id: str,
    identity: Optional[UserIdentity] = Depends(optional_identity),
    db: Session = Depends(get_db),
):
    d = definitions.find_by_id(db, definition_id)
    if not d:
        raise NotFound()

    [view] = build_views(db, [d], identity.id if identity else None)
    return DefinitionViewOut.from_view(view)


@router.post("/create", response_model=StatusMessageOut)
def create_definition(
    payload: DefinitionCreate,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    definitions.create(
        db,
        word=payload.word,
        definition=payload.definition,
        example=payload.example,
        user_id=user_id,
    )
    return StatusMessageOut(status=True, message=messages.DEFINITION_CREATED)
