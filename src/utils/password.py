"""
Password hashing for admin and salesperson accounts (bcrypt via passlib).
"""

from passlib.context import CryptContext

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """True if the plain-text password matches the stored bcrypt hash."""
    return pwd_context.verify(plain_password, hashed_password)
