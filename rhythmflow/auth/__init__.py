"""Credential storage and session tokens"""

from .credential_store import CredentialStore, hash_password, verify_password
from .token_service import TOKEN_LIFETIME, TokenService

__all__ = [
    "CredentialStore",
    "TokenService",
    "TOKEN_LIFETIME",
    "hash_password",
    "verify_password",
]
