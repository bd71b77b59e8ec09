from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core import messages, reactions
from ..core.database import get_db
from ..core.identity import current_user_id
from .schemas import MessageOut, ReactionChange

router = APIRouter(prefix="/reactions", tags=["reactions"])


@router.post("", response_model=MessageOut)
def change_reaction(
    payload: ReactionChange,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    reactions.react(
        db,
        user_id=user_id,
        definition_id=payload.id,
        reaction_type=payload.type,
        subaction=payload.subaction,
    )
    return MessageOut(message=messages.REACTION_SAVED)
