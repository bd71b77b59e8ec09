from .users import Role, RoleName, User
from .definitions import Definition
from .reactions import Reaction, ReactionType


__all__ = [
    "Role",
    "RoleName",
    "User",
    "Definition",
    "Reaction",
    "ReactionType",
]
