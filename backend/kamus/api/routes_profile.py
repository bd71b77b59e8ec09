from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core import messages, profiles
from ..core.database import get_db
from ..core.identity import UserIdentity, current_user_id, optional_identity
from ..core.errors import Unauthenticated
from .schemas import MessageOut, ProfileOut, ProfileUpdate

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=ProfileOut)
def read_profile(identity: UserIdentity | None = Depends(optional_identity)):
    if identity is None:
        raise Unauthenticated()
    return ProfileOut(
        id=identity.id,
        username=identity.username,
        email=identity.email,
        role=identity.role.value,
    )


@router.post("", response_model=MessageOut)
def update_profile(
    payload: ProfileUpdate,
    user_id: str = Depends(current_user_id),
    db: Session = Depends(get_db),
):
    profiles.update_username(db, user_id, payload.username)
    return MessageOut(message=messages.PROFILE_UPDATED)
