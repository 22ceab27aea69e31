"""
Auth gateway: registration, login and token-gated collection access.

HTTP-agnostic. Every rejection is raised as a RhythmFlowError subclass and
is terminal for the request; nothing here retries.
"""

from typing import Any, List, Optional

from ..auth.credential_store import MAX_SECRET_BYTES, CredentialStore
from ..auth.token_service import TokenService
from ..utils.exceptions import (
    InvalidCredentialsError,
    InvalidTokenError,
    MissingTokenError,
    ValidationError,
)
from ..utils.logger import get_logger
from .collection_store import CollectionStore

logger = get_logger(__name__)

MISSING_FIELDS = "Email and password required"
SECRET_TOO_LONG = f"Password must be at most {MAX_SECRET_BYTES} bytes"


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an ``Authorization: Bearer <token>`` value"""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


class AuthGateway:
    def __init__(
        self,
        credentials: CredentialStore,
        collections: CollectionStore,
        tokens: TokenService,
    ):
        self.credentials = credentials
        self.collections = collections
        self.tokens = tokens

    @staticmethod
    def _require_fields(identifier: Optional[str], secret: Optional[str]) -> None:
        if not identifier or not secret:
            raise ValidationError(MISSING_FIELDS)

    def register(self, identifier: Optional[str], secret: Optional[str]) -> None:
        self._require_fields(identifier, secret)
        if len(secret.encode("utf-8")) > MAX_SECRET_BYTES:
            raise ValidationError(SECRET_TOO_LONG)
        self.credentials.register(identifier, secret)

    def login(self, identifier: Optional[str], secret: Optional[str]) -> str:
        """Check credentials and mint a session token"""
        self._require_fields(identifier, secret)
        try:
            account = self.credentials.verify(identifier, secret)
        except InvalidCredentialsError as e:
            # Logged with the concrete reason; the caller only sees the generic message
            logger.info("Login rejected", identifier=identifier, reason=type(e).__name__)
            raise InvalidCredentialsError()
        token = self.tokens.issue(account.identifier)
        logger.info("Login succeeded", identifier=account.identifier)
        return token

    def authenticate(self, authorization: Optional[str]) -> str:
        """Resolve an Authorization header to the identifier it asserts"""
        token = extract_bearer_token(authorization)
        if token is None:
            raise MissingTokenError()
        try:
            return self.tokens.verify(token)
        except InvalidTokenError as e:
            logger.info("Token rejected", reason=type(e).__name__)
            raise

    def get_collection(self, identifier: str) -> List[Any]:
        return self.collections.get(identifier)

    def replace_collection(self, identifier: str, items: Any) -> None:
        self.collections.replace(identifier, items)
