"""Password and one-time code hashing helpers."""

import hashlib
import re
import secrets

import bcrypt

# 8-32 characters, at least one letter and one digit.
PASSWORD_PATTERN = re.compile(r"^(?=.*[A-Za-z])(?=.*\d)[\x21-\x7e]{8,32}$")


def is_valid_password(password: str) -> bool:
    return bool(PASSWORD_PATTERN.match(password))


def hash_password(password: str) -> str:
    """Hash a password with bcrypt. Returns the encoded hash string."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def generate_code(digits: int = 6) -> str:
    """Random numeric verification code, zero padded."""
    return f"{secrets.randbelow(10**digits):0{digits}d}"


def hash_code(code: str) -> str:
    """SHA-256 hex digest of a verification code."""
    return hashlib.sha256(code.encode("utf-8")).hexdigest()
