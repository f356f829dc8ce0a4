"""Password hashing with bcrypt"""

from functools import lru_cache

import bcrypt

# bcrypt only looks at the first 72 bytes of its input
MAX_PASSWORD_BYTES = 72
MIN_ROUNDS = 12


def hash_password(password: str, rounds: int = MIN_ROUNDS) -> str:
    """Salted bcrypt hash; rounds below the minimum work factor are refused"""
    if rounds < MIN_ROUNDS:
        raise ValueError(f"bcrypt work factor must be at least {MIN_ROUNDS}, got {rounds}")
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password longer than {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    """Constant-time check of a password against a stored hash"""
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


@lru_cache
def dummy_hash(rounds: int = MIN_ROUNDS) -> str:
    """Hash checked for unknown emails so lookups cost the same as real ones"""
    return hash_password("not-a-real-password", rounds=rounds)
