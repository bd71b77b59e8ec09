import secrets
import string

ID_ALPHABET = string.digits + string.ascii_lowercase
ID_LENGTH = 20


def new_id() -> str:
    """Opaque random id over [0-9a-z], used as primary key for every table."""
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_LENGTH))
