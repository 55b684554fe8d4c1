"""
Password hashing with bcrypt.
"""
import bcrypt

from ..config.settings import get_settings


def hash_password(password: str) -> str:
    """
    Hash a password using bcrypt.
    Passwords are encoded to bytes and hashed with a fresh salt.
    """
    salt = bcrypt.gensalt(rounds=get_settings().bcrypt_rounds)
    hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
    return hashed.decode("utf-8")

