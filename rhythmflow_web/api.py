"""API routes: accounts, the saved collection, and the catalog proxy"""

from fastapi import APIRouter, Depends, Query
from fastapi.concurrency import run_in_threadpool

from rhythmflow.api.catalog_client import CatalogClient
from rhythmflow.services.auth_gateway import AuthGateway

from .auth_deps import get_catalog, get_gateway, require_identity
from .models import (
    CollectionRequest,
    CollectionResponse,
    CredentialsRequest,
    LoginResponse,
    SuccessResponse,
)


router = APIRouter(tags=["auth"])
catalog_router = APIRouter(prefix="/api", tags=["catalog"])


@router.get("/health")
async def health_check():
    return {"status": "ok"}


@router.post("/register", response_model=SuccessResponse)
async def register(
    body: CredentialsRequest,
    gateway: AuthGateway = Depends(get_gateway),
):
    """
    Register a new account.

    Request (JSON):
        identifier (or email), secret (or password)

    Errors:
        400 missing fields, 409 identifier already registered
    """
    await run_in_threadpool(gateway.register, body.identifier, body.secret)
    return SuccessResponse()


@router.post("/login", response_model=LoginResponse)
async def login(
    body: CredentialsRequest,
    gateway: AuthGateway = Depends(get_gateway),
):
    """
    Log in and receive a bearer token valid for two hours.

    Unknown identifier and wrong secret both answer 401 "Invalid credentials".
    """
    token = await run_in_threadpool(gateway.login, body.identifier, body.secret)
    return LoginResponse(token=token)


@router.get("/collection", response_model=CollectionResponse)
async def get_collection(
    identifier: str = Depends(require_identity),
    gateway: AuthGateway = Depends(get_gateway),
):
    items = await run_in_threadpool(gateway.get_collection, identifier)
    return CollectionResponse(items=items)


@router.post("/collection", response_model=SuccessResponse)
async def replace_collection(
    body: CollectionRequest,
    identifier: str = Depends(require_identity),
    gateway: AuthGateway = Depends(get_gateway),
):
    """Replace the caller's whole collection with ``items``"""
    await run_in_threadpool(gateway.replace_collection, identifier, body.items)
    return SuccessResponse()


@catalog_router.get("/search")
async def search(
    q: str = Query(default=""),
    catalog: CatalogClient = Depends(get_catalog),
):
    return await run_in_threadpool(catalog.search, q)


@catalog_router.get("/track/{track_id}")
async def get_track(track_id: int, catalog: CatalogClient = Depends(get_catalog)):
    return await run_in_threadpool(catalog.track, track_id)


@catalog_router.get("/album/{album_id}")
async def get_album(album_id: int, catalog: CatalogClient = Depends(get_catalog)):
    return await run_in_threadpool(catalog.album, album_id)


@catalog_router.get("/artist/{artist_id}")
async def get_artist(artist_id: int, catalog: CatalogClient = Depends(get_catalog)):
    return await run_in_threadpool(catalog.artist, artist_id)
