"""Custom exceptions for the RhythmFlow server"""

from typing import Optional


class RhythmFlowError(Exception):
    """Base exception for RhythmFlow"""

    status_code: int = 500

    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(RhythmFlowError):
    """Missing or malformed client input"""

    status_code = 400


class InvalidShapeError(ValidationError):
    """Collection payload is not a sequence"""
    pass


class ConflictError(RhythmFlowError):
    """Identifier already registered"""

    status_code = 409


class AuthError(RhythmFlowError):
    """Authentication failure (credentials or bearer token)"""

    status_code = 401


class InvalidCredentialsError(AuthError):
    """Login rejected. Same message whichever part failed."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class AccountNotFoundError(InvalidCredentialsError):
    pass


class CredentialMismatchError(InvalidCredentialsError):
    pass


class MissingTokenError(AuthError):
    """No bearer token on the request"""

    def __init__(self, message: str = "No token provided"):
        super().__init__(message)


class InvalidTokenError(AuthError):
    """Bearer token is malformed or its signature does not match"""

    status_code = 403

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class TokenExpiredError(InvalidTokenError):
    """Bearer token is past its lifetime"""

    def __init__(self, message: str = "Token expired"):
        super().__init__(message)


class StoreIOError(RhythmFlowError):
    """Backing JSON document unreadable or unwritable"""

    status_code = 500


class CatalogError(RhythmFlowError):
    """Error fetching from the external music catalog"""

    def __init__(self, message: str, status_code: int = 502, details: Optional[str] = None):
        self.status_code = status_code
        super().__init__(message, details=details)


class ConfigError(RhythmFlowError):
    """Configuration error"""
    pass
