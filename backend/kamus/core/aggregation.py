"""
Reaction read model.

Counts and the caller's own reactions are fetched with one query each per
batch of definition ids (one page), then joined onto the definitions by
`annotate`, which does no I/O.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from ..models import Definition, Reaction, ReactionType


@dataclass(frozen=True)
class ReactionCounts:
    likes: int = 0
    dislikes: int = 0


@dataclass(frozen=True)
class OwnReaction:
    id: str
    type: ReactionType


@dataclass
class DefinitionView:
    id: str
    word: str
    definition: str
    example: str
    username: str
    approved_at: Optional[datetime] = None
    reaction: Optional[ReactionCounts] = None
    current_user_reaction: Optional[OwnReaction] = None

    @property
    def likes(self) -> int:
        return self.reaction.likes if self.reaction else 0

    @property
    def dislikes(self) -> int:
        return self.reaction.dislikes if self.reaction else 0


def counts_for(db: Session, definition_ids: Iterable[str]) -> Dict[str, ReactionCounts]:
    """
    Active like/dislike counts per definition. Definitions without any
    active reaction are absent from the result; read them as zero.
    """
    ids = set(definition_ids)
    if not ids:
        return {}

    rows = (
        db.query(
            Reaction.definition_id,
            func.count(case((Reaction.type == ReactionType.LIKE, 1))),
            func.count(case((Reaction.type == ReactionType.DISLIKE, 1))),
        )
        .filter(
            Reaction.definition_id.in_(ids),
            Reaction.deleted_at.is_(None),
        )
        .group_by(Reaction.definition_id)
        .all()
    )
    return {
        definition_id: ReactionCounts(likes=likes, dislikes=dislikes)
        for definition_id, likes, dislikes in rows
    }


def current_user_reactions(
    db: Session, user_id: Optional[str], definition_ids: Iterable[str]
) -> Dict[str, OwnReaction]:
    ids = set(definition_ids)
    if not user_id or not ids:
        return {}

    rows = (
        db.query(Reaction.id, Reaction.type, Reaction.definition_id)
        .filter(
            Reaction.user_id == user_id,
            Reaction.definition_id.in_(ids),
            Reaction.deleted_at.is_(None),
        )
        .all()
    )
    return {
        definition_id: OwnReaction(id=reaction_id, type=reaction_type)
        for reaction_id, reaction_type, definition_id in rows
    }


def annotate(
    definitions: Iterable[Definition],
    counts: Dict[str, ReactionCounts],
    user_reactions: Dict[str, OwnReaction],
) -> List[DefinitionView]:
    return [
        DefinitionView(
            id=d.id,
            word=d.word,
            definition=d.definition,
            example=d.example,
            username=d.user.username,
            approved_at=d.approved_at,
            reaction=counts.get(d.id),
            current_user_reaction=user_reactions.get(d.id),
        )
        for d in definitions
    ]


def build_views(
    db: Session, definitions: List[Definition], user_id: Optional[str]
) -> List[DefinitionView]:
    ids = [d.id for d in definitions]
    return annotate(
        definitions,
        counts_for(db, ids),
        current_user_reactions(db, user_id, ids),
    )
