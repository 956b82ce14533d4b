"""
Discord Service — OAuth2 code redemption and profile lookup.

Flow:
    1. /login redirects to build_authorize_url()
    2. Discord redirects back with ?code=...
    3. exchange_code() redeems the code for an access token
    4. fetch_profile() reads the user and their guild membership (roles,
       per-guild avatar)

Every HTTP failure is reported as UpstreamAuthError.
"""
import logging
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import urlencode

import httpx

from config import Settings
from domain.constants import DISCORD_AUTHORIZE_URL, DISCORD_OAUTH_SCOPE
from exceptions import UpstreamAuthError

logger = logging.getLogger(__name__)


def build_authorize_url(settings: Settings) -> str:
    """Discord authorize URL for the configured application."""
    params = {
        "client_id": settings.discord_client_id,
        "redirect_uri": settings.discord_redirect_uri,
        "response_type": "code",
        "scope": DISCORD_OAUTH_SCOPE,
    }
    return f"{DISCORD_AUTHORIZE_URL}?{urlencode(params)}"


@dataclass(frozen=True)
class DiscordProfile:
    """What the NFT generator needs to know about a user."""
    id: str
    username: str
    discriminator: Optional[str] = None
    avatar: Optional[str] = None
    guild_avatar: Optional[str] = None
    roles: frozenset[str] = field(default_factory=frozenset)


def avatar_url(profile: DiscordProfile, guild_id: str, cdn_base: str = "https://cdn.discordapp.com") -> str:
    """
    Best avatar for the profile.

    Guild-specific avatar first, then the account avatar, then Discord's
    default embed avatar.
    """
    if profile.guild_avatar and guild_id:
        return (
            f"{cdn_base}/guilds/{guild_id}/users/{profile.id}"
            f"/avatars/{profile.guild_avatar}.png?size=1024"
        )
    if profile.avatar:
        return f"{cdn_base}/avatars/{profile.id}/{profile.avatar}.png?size=1024"
    return f"{cdn_base}/embed/avatars/{default_avatar_index(profile)}.png"


def default_avatar_index(profile: DiscordProfile) -> int:
    """Legacy tags use discriminator % 5; migrated usernames use (id >> 22) % 6."""
    if profile.discriminator and profile.discriminator != "0":
        try:
            return int(profile.discriminator) % 5
        except ValueError:
            pass
    try:
        return (int(profile.id) >> 22) % 6
    except ValueError:
        return 0


class DiscordClient:
    """Async Discord REST client scoped to one OAuth application."""

    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.api_base = settings.discord_api_base.rstrip("/")
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=15.0, transport=self._transport)

    async def exchange_code(self, code: str) -> str:
        """
        Redeem an authorization code.

        Returns:
            str: Ready-to-use Authorization header value ("Bearer <token>")
        """
        form = {
            "client_id": self.settings.discord_client_id,
            "client_secret": self.settings.discord_client_secret,
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": self.settings.discord_redirect_uri,
            "scope": DISCORD_OAUTH_SCOPE,
        }
        try:
            async with self._client() as client:
                response = await client.post(
                    f"{self.api_base}/oauth2/token",
                    data=form,
                    headers={"Content-Type": "application/x-www-form-urlencoded"},
                )
                response.raise_for_status()
                token = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamAuthError(f"OAuth code exchange failed: {_describe(e)}") from e

        if "access_token" not in token:
            raise UpstreamAuthError("OAuth code exchange returned no access_token")
        return f"{token.get('token_type', 'Bearer')} {token['access_token']}"

    async def _get_json(self, client: httpx.AsyncClient, path: str, authorization: str) -> dict:
        try:
            response = await client.get(
                f"{self.api_base}{path}",
                headers={"Authorization": authorization},
            )
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamAuthError(f"Discord GET {path} failed: {_describe(e)}") from e

    async def fetch_profile(self, authorization: str) -> DiscordProfile:
        """Read /users/@me and, when a guild is configured, the guild member."""
        guild_id = self.settings.discord_guild_id
        async with self._client() as client:
            user = await self._get_json(client, "/users/@me", authorization)
            member = {}
            if guild_id:
                member = await self._get_json(
                    client, f"/users/@me/guilds/{guild_id}/member", authorization
                )

        if "id" not in user:
            raise UpstreamAuthError("Discord profile response has no user id")
        return DiscordProfile(
            id=str(user["id"]),
            username=user.get("username", ""),
            discriminator=user.get("discriminator"),
            avatar=user.get("avatar"),
            guild_avatar=member.get("avatar"),
            roles=frozenset(str(role) for role in member.get("roles", [])),
        )


def _describe(error: Exception) -> str:
    """Include Discord's error body when there is one."""
    if isinstance(error, httpx.HTTPStatusError):
        return f"{error.response.status_code} {error.response.text[:200]}"
    return str(error)
