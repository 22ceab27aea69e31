"""Record schemas for persisted accounts, collections, and token claims"""

from datetime import datetime, timezone
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, RootModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Account(BaseModel):
    """Registered account. Never updated in place."""

    model_config = ConfigDict(frozen=True)

    identifier: str = Field(min_length=1)
    credential_hash: str
    created_at: datetime = Field(default_factory=_utcnow)


class AccountsDocument(RootModel[Dict[str, Account]]):
    """accounts.json: identifier -> Account"""


class CollectionsDocument(RootModel[Dict[str, List[Any]]]):
    """collections.json: identifier -> ordered item list"""


class SessionClaims(BaseModel):
    """Payload carried inside a signed session token"""

    sub: str = Field(min_length=1)
    iat: int
