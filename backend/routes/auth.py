"""
Auth endpoints — Discord OAuth2 login and callback.

Flow:
  1) GET /login          -> 302 to Discord's authorize page
  2) GET /auth/callback  -> redeem code, read profile + guild roles,
                            compose the NFT image, save it, render the
                            wallet page
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse

from config import Settings
from deps import get_app_settings, get_avatar_fetcher, get_discord_client, get_image_store, get_ledger
from exceptions import ImageError, UpstreamAuthError
from services.discord_service import DiscordClient, avatar_url, build_authorize_url
from services.image_service import AvatarFetcher, compose_image
from services.image_store import ImageStore
from services.ledger_service import LedgerClient
from utils.pages import render_nft_page

logger = logging.getLogger(__name__)
router = APIRouter(tags=["auth"])


@router.get("/login")
async def login(settings: Settings = Depends(get_app_settings)):
    """Start the Discord OAuth2 flow."""
    return RedirectResponse(build_authorize_url(settings), status_code=302)


@router.get("/auth/callback", response_class=HTMLResponse)
@router.get("/auth/discord/callback", response_class=HTMLResponse, include_in_schema=False)
async def auth_callback(
    code: Optional[str] = None,
    settings: Settings = Depends(get_app_settings),
    discord: DiscordClient = Depends(get_discord_client),
    fetch_avatar: AvatarFetcher = Depends(get_avatar_fetcher),
    image_store: ImageStore = Depends(get_image_store),
    ledger: LedgerClient = Depends(get_ledger),
):
    """
    Discord OAuth2 redirect target.

    400 without a code; 500 with a generic message when Discord, the avatar
    download or the image write fails (details go to the server log).
    """
    if not code:
        return PlainTextResponse("No code provided", status_code=400)

    try:
        authorization = await discord.exchange_code(code)
        profile = await discord.fetch_profile(authorization)

        avatar_source = avatar_url(profile, settings.discord_guild_id, settings.discord_cdn_base)
        avatar = await fetch_avatar(avatar_source)
        image_bytes = compose_image(avatar, profile.roles)
        image_store.save(profile.id, image_bytes)
    except (UpstreamAuthError, ImageError) as e:
        logger.error(f"Error during OAuth flow: {e}")
        return PlainTextResponse("Authentication failed. Please try again.", status_code=500)

    logger.info(f"User ID: {profile.id}")
    logger.info(f"Username: {profile.username}")
    logger.info(f"Avatar URL: {avatar_source}")

    return HTMLResponse(
        render_nft_page(
            username=profile.username,
            user_id=profile.id,
            settings=settings,
            contract_address=ledger.contract_address,
        )
    )
