from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

from ..core import messages
from ..core.aggregation import DefinitionView
from ..core.pagination import Page
from ..models import ReactionType


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


def _required(field: str, v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError(messages.REQUIRED_FIELD[field])
    return v


# ---------- Requests ----------


class DefinitionCreate(BaseModel):
    word: str
    definition: str
    example: str

    @field_validator("word", "definition", "example")
    @classmethod
    def not_blank(cls, v: str, info) -> str:
        return _required(info.field_name, v)


class ReactionChange(BaseModel):
    # Missing ids fall through to the validator for the reaction-specific message.
    id: str = Field("", validate_default=True)
    type: ReactionType
    subaction: Literal["upsert", "delete"]

    @field_validator("id")
    @classmethod
    def id_not_blank(cls, v: str) -> str:
        return _required("reaction_id", v)


class ApproveRequest(BaseModel):
    id: str

    @field_validator("id")
    @classmethod
    def id_not_blank(cls, v: str) -> str:
        return _required("id", v)


class ProfileUpdate(BaseModel):
    username: str

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str) -> str:
        return _required("username", v)


# ---------- Responses ----------


class MessageOut(BaseModel):
    message: str


class StatusMessageOut(BaseModel):
    status: bool
    message: str


class UserOut(CamelModel):
    username: str


class ProfileOut(CamelModel):
    id: str
    username: str
    email: str
    role: str


class ReactionCountsOut(CamelModel):
    likes: int
    dislikes: int


class OwnReactionOut(CamelModel):
    id: str
    type: ReactionType


class DefinitionViewOut(CamelModel):
    id: str
    word: str
    definition: str
    example: str
    user: UserOut
    reaction: Optional[ReactionCountsOut] = None
    current_user_reaction: Optional[OwnReactionOut] = None

    @classmethod
    def from_view(cls, v: DefinitionView) -> "DefinitionViewOut":
        return cls(
            id=v.id,
            word=v.word,
            definition=v.definition,
            example=v.example,
            user=UserOut(username=v.username),
            reaction=ReactionCountsOut.model_validate(v.reaction) if v.reaction else None,
            current_user_reaction=(
                OwnReactionOut.model_validate(v.current_user_reaction)
                if v.current_user_reaction
                else None
            ),
        )


class DefinitionPageOut(CamelModel):
    data: List[DefinitionViewOut]
    has_next_page: bool
    end_cursor: Optional[str]

    @classmethod
    def from_page(cls, page: Page[DefinitionView]) -> "DefinitionPageOut":
        return cls(
            data=[DefinitionViewOut.from_view(v) for v in page.data],
            has_next_page=page.has_next_page,
            end_cursor=page.end_cursor,
        )


class PendingDefinitionOut(CamelModel):
    id: str
    word: str
    definition: str
    example: str
    approved_at: Optional[datetime]
    user: UserOut


class PendingPageOut(CamelModel):
    data: List[PendingDefinitionOut]
    has_next_page: bool
    end_cursor: Optional[str]


class PendingDetailOut(CamelModel):
    data: PendingDefinitionOut
