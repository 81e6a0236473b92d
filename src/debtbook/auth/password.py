"""Password hashing for user accounts.

Learn: bcrypt salts every hash and stores its cost factor inside it
("$2b$12$..."). The cost is a setting (DEBTBOOK_BCRYPT_ROUNDS), and a
hash made with a lower cost than currently configured is re-hashed the
next time its owner logs in successfully.
"""

from typing import Optional

import bcrypt

from debtbook.config import settings

# bcrypt only looks at the first 72 bytes of a password.
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """Hash a password at the configured (or given) cost."""
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(_encode(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def hash_cost(password_hash: str) -> Optional[int]:
    """Cost factor embedded in a bcrypt hash, or None if it isn't one."""
    parts = password_hash.split("$")
    if len(parts) < 4 or not parts[2].isdigit():
        return None
    return int(parts[2])


def needs_rehash(password_hash: str, rounds: Optional[int] = None) -> bool:
    """True when the hash was made with less work than we now require."""
    cost = hash_cost(password_hash)
    return cost is None or cost < (rounds or settings.bcrypt_rounds)
