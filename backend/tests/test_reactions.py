import pytest

from kamus.core import reactions
from kamus.core.aggregation import ReactionCounts, counts_for, current_user_reactions
from kamus.core.errors import NotFound
from kamus.models import Reaction, ReactionType


@pytest.fixture
def definition(make_user, make_definition):
    return make_definition(make_user("author"), approved=1)


def _rows(db, user, definition):
    return (
        db.query(Reaction)
        .filter(Reaction.user_id == user.id, Reaction.definition_id == definition.id)
        .populate_existing()
        .all()
    )


def test_like_retract_dislike(db, make_user, definition):
    u2 = make_user("u2")

    assert counts_for(db, [definition.id]).get(definition.id) is None

    reactions.react(db, u2.id, definition.id, ReactionType.LIKE, "upsert")
    assert counts_for(db, [definition.id])[definition.id] == ReactionCounts(likes=1, dislikes=0)
    assert current_user_reactions(db, u2.id, [definition.id])[definition.id].type == ReactionType.LIKE

    reactions.react(db, u2.id, definition.id, ReactionType.LIKE, "delete")
    assert counts_for(db, [definition.id]).get(definition.id) is None
    assert current_user_reactions(db, u2.id, [definition.id]) == {}

    reactions.react(db, u2.id, definition.id, ReactionType.DISLIKE, "upsert")
    assert counts_for(db, [definition.id])[definition.id] == ReactionCounts(likes=0, dislikes=1)
    own = current_user_reactions(db, u2.id, [definition.id])
    assert own[definition.id].type == ReactionType.DISLIKE

    assert len(_rows(db, u2, definition)) == 1


def test_toggling_keeps_a_single_row_with_latest_type(db, make_user, definition):
    u = make_user("u")
    calls = [
        (ReactionType.LIKE, "upsert"),
        (ReactionType.DISLIKE, "upsert"),
        (ReactionType.DISLIKE, "delete"),
        (ReactionType.LIKE, "upsert"),
        (ReactionType.DISLIKE, "upsert"),
    ]
    for reaction_type, subaction in calls:
        reactions.react(db, u.id, definition.id, reaction_type, subaction)

    rows = _rows(db, u, definition)
    assert len(rows) == 1
    assert rows[0].deleted_at is None
    assert rows[0].type == ReactionType.DISLIKE


def test_retract_leaves_type_unchanged(db, make_user, definition):
    u = make_user("u")
    reactions.react(db, u.id, definition.id, ReactionType.LIKE, "upsert")
    reactions.react(db, u.id, definition.id, ReactionType.DISLIKE, "delete")

    [row] = _rows(db, u, definition)
    assert row.deleted_at is not None
    assert row.type == ReactionType.LIKE


def test_retract_before_any_reaction_stores_an_inactive_row(db, make_user, definition):
    u = make_user("u")
    reactions.react(db, u.id, definition.id, ReactionType.LIKE, "delete")

    [row] = _rows(db, u, definition)
    assert row.deleted_at is not None
    assert counts_for(db, [definition.id]) == {}


def test_reacting_updates_the_existing_row(db, make_user, definition):
    u = make_user("u")
    reactions.react(db, u.id, definition.id, ReactionType.LIKE, "upsert")
    [first] = _rows(db, u, definition)
    first_id = first.id

    reactions.react(db, u.id, definition.id, ReactionType.DISLIKE, "upsert")

    [row] = _rows(db, u, definition)
    assert row.id == first_id


def test_cannot_react_to_pending_or_deleted(db, make_user, make_definition):
    author = make_user("author")
    u = make_user("u")
    pending = make_definition(author)
    deleted = make_definition(author, approved=1, deleted=True)

    with pytest.raises(NotFound):
        reactions.react(db, u.id, pending.id, ReactionType.LIKE, "upsert")
    with pytest.raises(NotFound):
        reactions.react(db, u.id, deleted.id, ReactionType.LIKE, "upsert")
    with pytest.raises(NotFound):
        reactions.react(db, u.id, "missing", ReactionType.LIKE, "upsert")
