"""API request/response models"""

from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, Field


class CredentialsRequest(BaseModel):
    """Register/login body. Accepts identifier/secret or email/password."""
    identifier: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("identifier", "email")
    )
    secret: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("secret", "password")
    )


class CollectionRequest(BaseModel):
    # Shape is checked by the collection store so a non-list gets its own error
    items: Any = None


class SuccessResponse(BaseModel):
    success: bool = True


class LoginResponse(SuccessResponse):
    token: str


class CollectionResponse(BaseModel):
    items: List[Any]
