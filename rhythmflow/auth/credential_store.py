"""
Credential storage: identifier -> bcrypt-hashed account record.
"""

from typing import Dict, Optional

import bcrypt
from pydantic import ValidationError as PydanticValidationError

from ..models.account import Account, AccountsDocument
from ..storage.json_storage import DocumentStorage
from ..utils.exceptions import (
    AccountNotFoundError,
    ConflictError,
    CredentialMismatchError,
    StoreIOError,
)
from ..utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_BCRYPT_ROUNDS = 10
# bcrypt only looks at the first 72 bytes and newer releases refuse longer input
MAX_SECRET_BYTES = 72


def hash_password(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Hash a password using bcrypt"""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its hash"""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash, or a secret over MAX_SECRET_BYTES
        return False


class CredentialStore:
    """Accounts keyed by exact (case-sensitive) identifier"""

    def __init__(self, storage: DocumentStorage, bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS):
        self._storage = storage
        self._rounds = bcrypt_rounds
        # Checked against when the identifier is unknown so both failures cost one bcrypt round
        self._dummy_hash = hash_password("rhythmflow-dummy-secret", bcrypt_rounds)

    def _load(self) -> Dict[str, Account]:
        try:
            return AccountsDocument.model_validate(self._storage.load()).root
        except PydanticValidationError as e:
            raise StoreIOError("Account store is corrupt", details=str(e))

    def _save(self, accounts: Dict[str, Account]) -> None:
        self._storage.save(AccountsDocument(accounts).model_dump(mode="json"))

    def get(self, identifier: str) -> Optional[Account]:
        return self._load().get(identifier)

    def register(self, identifier: str, secret: str) -> Account:
        """
        Create an account.

        Raises ConflictError if the identifier is already registered.
        """
        # Hash before taking the lock; bcrypt is the slow part.
        credential_hash = hash_password(secret, self._rounds)
        with self._storage.lock:
            accounts = self._load()
            if identifier in accounts:
                raise ConflictError("User already exists")
            account = Account(identifier=identifier, credential_hash=credential_hash)
            accounts[identifier] = account
            self._save(accounts)
        logger.info("Account registered", identifier=identifier)
        return account

    def verify(self, identifier: str, secret: str) -> Account:
        """
        Check a secret against the stored hash.

        Raises AccountNotFoundError or CredentialMismatchError; both carry
        the same message so callers cannot tell them apart by accident.
        """
        account = self.get(identifier)
        if account is None:
            verify_password(secret, self._dummy_hash)
            raise AccountNotFoundError()
        if not verify_password(secret, account.credential_hash):
            raise CredentialMismatchError()
        return account
