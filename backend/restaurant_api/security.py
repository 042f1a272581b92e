"""
Password hashing, bearer tokens and one-time secrets.
"""
import re
import secrets
from typing import Optional
from datetime import timedelta

from flask_jwt_extended import create_access_token
from werkzeug.security import generate_password_hash, check_password_hash

# At least 8 characters, 1 uppercase, 1 lowercase, 1 number
PASSWORD_PATTERN = re.compile(r'^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)[a-zA-Z\d@$!%*?&]{8,}$')
PHONE_PATTERN = re.compile(r'^\+?[\d\s\-\(\)]{10,15}$')

def hash_password(password: str) -> str:
    return generate_password_hash(password)

def verify_password(password: str, password_hash: Optional[str]) -> bool:
    if not password_hash:
        return False
    return check_password_hash(password_hash, password)

def issue_token(user, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a bearer token carrying the user's id, email and role.

    Without ``expires_delta`` the lifetime comes from ``JWT_ACCESS_TOKEN_EXPIRES``.
    """
    return create_access_token(
        identity=str(user.id),
        additional_claims={'email': user.email, 'role': user.role},
        expires_delta=expires_delta
    )

def generate_reset_token() -> str:
    return secrets.token_hex(32)

def generate_confirmation_code() -> str:
    return str(100000 + secrets.randbelow(900000))

def is_valid_password(password: Optional[str]) -> bool:
    return bool(password) and PASSWORD_PATTERN.match(password) is not None

def is_valid_phone(phone: Optional[str]) -> bool:
    return bool(phone) and PHONE_PATTERN.match(phone) is not None
