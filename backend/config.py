"""
Configuration management for the Discord PFP minting backend.

Loads settings from .env via pydantic-settings.

Notes:
    - The three Discord OAuth values are required; validate_required_settings()
      is called from the app lifespan so a misconfigured process never serves.
    - Everything else (Pinata keys, RPC key, signing key) is read as-is.
    - signer_address is derived once from PRIVATE_KEY and cached.
"""
import logging
from functools import cached_property, lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── Discord OAuth2 ──────────────────────────────────────────────
    discord_client_id: str = ""
    discord_client_secret: str = ""
    discord_redirect_uri: str = ""
    discord_guild_id: str = ""
    discord_bot_token: str = ""
    discord_api_base: str = "https://discord.com/api"
    discord_cdn_base: str = "https://cdn.discordapp.com"

    # ── Pinata IPFS ─────────────────────────────────────────────────
    pinata_api_key: str = ""
    pinata_secret_api_key: str = ""
    pinata_api_base: str = "https://api.pinata.cloud"
    pinata_gateway: str = "https://gateway.pinata.cloud/ipfs"

    # ── Ledger (Sepolia via Alchemy) ────────────────────────────────
    alchemy_api_key: str = ""
    ledger_rpc_url: str = ""
    contract_address: str = "0xFf35268905302Ecf90b175E7277c59cFD471bBc3"
    private_key: str = ""
    ledger_max_workers: int = 4

    # ── Wallet page (public values only, rendered into HTML) ────────
    chain_id: int = 11155111
    chain_name: str = "Sepolia Test Network"
    chain_public_rpc_url: str = "https://rpc.sepolia.org"
    block_explorer_url: str = "https://sepolia.etherscan.io"

    # ── Images / pricing ────────────────────────────────────────────
    nft_image_dir: str = "nft-images"
    default_mint_role: str = "Newbie"

    # ── Application ─────────────────────────────────────────────────
    environment: str = "development"
    port: int = 3000
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # allow unknown .env keys without crashing
    )

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def rpc_url(self) -> str:
        """Explicit LEDGER_RPC_URL wins, otherwise the Alchemy Sepolia endpoint."""
        if self.ledger_rpc_url:
            return self.ledger_rpc_url
        return f"https://eth-sepolia.g.alchemy.com/v2/{self.alchemy_api_key}"

    @property
    def chain_id_hex(self) -> str:
        return hex(self.chain_id)

    @cached_property
    def signer_address(self) -> Optional[str]:
        """
        Address of the configured signing key (computed once, cached).

        The key itself is not validated at startup; a malformed key only
        surfaces when something asks for the address.
        """
        if not self.private_key:
            return None
        from eth_account import Account
        return Account.from_key(self.private_key).address

    def validate_required_settings(self):
        """
        Fail fast when the Discord OAuth values are missing.

        Called during app startup. Only presence flags are reported,
        never the values themselves.
        """
        presence = {
            "clientId": bool(self.discord_client_id),
            "clientSecret": bool(self.discord_client_secret),
            "redirectUri": bool(self.discord_redirect_uri),
        }
        if not all(presence.values()):
            logger.error(f"Missing required Discord environment variables: {presence}")
            raise ConfigurationError(
                "DISCORD_CLIENT_ID, DISCORD_CLIENT_SECRET and DISCORD_REDIRECT_URI must be set",
                missing=[name for name, present in presence.items() if not present],
            )

        warnings = []
        if not self.pinata_api_key or not self.pinata_secret_api_key:
            warnings.append("PINATA_API_KEY / PINATA_SECRET_API_KEY not set (uploads will fail)")
        if not self.ledger_rpc_url and not self.alchemy_api_key:
            warnings.append("ALCHEMY_API_KEY not set (price lookups will fail)")
        if not self.discord_guild_id:
            warnings.append("DISCORD_GUILD_ID not set (no role-based backgrounds)")
        for w in warnings:
            logger.warning(w)


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, constructed once."""
    return Settings()
