"""Password hashing helpers."""

import bcrypt

DEFAULT_ROUNDS = 12
# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def get_password_hash(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password with a fresh per-password salt."""
    if not password:
        raise ValueError("Password cannot be empty")
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=rounds)).decode("ascii")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against a stored hash. Malformed hashes never match."""
    if not plain_password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(_encode(plain_password), hashed_password.encode("ascii"))
    except ValueError:
        return False
