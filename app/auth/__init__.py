"""
Authentication module for password login and JWT tokens
"""
from app.auth.utils import (
    get_current_user,
    create_access_token,
    create_refresh_token,
    hash_password,
    verify_password,
)
from app.auth.config import settings

__all__ = [
    "get_current_user",
    "create_access_token",
    "create_refresh_token",
    "hash_password",
    "verify_password",
    "settings",
]
