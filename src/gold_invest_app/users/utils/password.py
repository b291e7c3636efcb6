from typing import Optional
from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

# Shared hasher; parameters follow argon2-cffi defaults
hasher = PasswordHasher()


def hash_password(password: str) -> str:
    return hasher.hash(password)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """
    True when ``plain_password`` matches the stored Argon2 hash.
    Accounts without a stored hash never match.
    """
    if not hashed_password:
        return False
    try:
        return hasher.verify(hashed_password, plain_password)
    except (VerificationError, InvalidHashError):
        return False


def needs_rehash(hashed_password: str) -> bool:
    return hasher.check_needs_rehash(hashed_password)
