import bcrypt

from stashgate.core.config import settings
from stashgate.core.errors import InvalidInput

BCRYPT_MAX_BYTES = 72


def get_password_hash(password: str, rounds: int | None = None) -> str:
    raw = password.encode("utf-8")
    if len(raw) > BCRYPT_MAX_BYTES:
        raise InvalidInput(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")
    salt = bcrypt.gensalt(rounds=rounds or settings.SHARE_PASSWORD_BCRYPT_ROUNDS)
    return bcrypt.hashpw(raw, salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    raw = plain_password.encode("utf-8")
    if len(raw) > BCRYPT_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(raw, hashed_password.encode("utf-8"))
    except ValueError:
        # malformed stored hash
        return False
