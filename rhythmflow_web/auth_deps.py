"""
FastAPI dependencies for the gateway and bearer-token authentication.
"""

from fastapi import Depends, Request

from rhythmflow.api.catalog_client import CatalogClient
from rhythmflow.services.auth_gateway import AuthGateway


def get_gateway(request: Request) -> AuthGateway:
    return request.app.state.gateway


def get_catalog(request: Request) -> CatalogClient:
    return request.app.state.catalog


async def require_identity(
    request: Request,
    gateway: AuthGateway = Depends(get_gateway),
) -> str:
    """
    Dependency for protected routes.

    Raises MissingTokenError (401) without a bearer token and
    InvalidTokenError/TokenExpiredError (403) for a bad one.
    """
    return gateway.authenticate(request.headers.get("Authorization"))
