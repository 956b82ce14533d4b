"""
Shared FastAPI dependencies.

Collaborators are built once in the app lifespan and parked on app.state;
routers only ever reach them through these functions, which tests replace
via app.dependency_overrides.
"""

from __future__ import annotations

from fastapi import Request

from config import Settings
from services.discord_service import DiscordClient
from services.image_service import AvatarFetcher
from services.image_store import ImageStore
from services.ipfs_service import PinataClient
from services.ledger_service import LedgerClient
from services.mint_service import MintService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_image_store(request: Request) -> ImageStore:
    return request.app.state.image_store


def get_ledger(request: Request) -> LedgerClient:
    return request.app.state.ledger


def get_pinata(request: Request) -> PinataClient:
    return request.app.state.pinata


def get_discord_client(request: Request) -> DiscordClient:
    return request.app.state.discord


def get_mint_service(request: Request) -> MintService:
    return request.app.state.mint_service


def get_avatar_fetcher(request: Request) -> AvatarFetcher:
    return request.app.state.avatar_fetcher
