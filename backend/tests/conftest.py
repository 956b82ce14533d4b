"""
Pytest configuration and shared fixtures.

Provides a FastAPI test client wired to in-process fakes for the ledger,
Pinata and Discord, plus a temporary image directory per test.
"""
import os
from typing import Generator, Optional

# Required settings must exist before main.py builds its module-level app
os.environ.setdefault("DISCORD_CLIENT_ID", "test-client-id")
os.environ.setdefault("DISCORD_CLIENT_SECRET", "test-client-secret")
os.environ.setdefault("DISCORD_REDIRECT_URI", "http://localhost:3000/auth/callback")

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from config import Settings
from deps import (
    get_avatar_fetcher,
    get_discord_client,
    get_image_store,
    get_ledger,
    get_mint_service,
    get_pinata,
)
from exceptions import ContractReadError, UpstreamAuthError, UploadError
from services.discord_service import DiscordProfile
from services.image_store import ImageStore
from services.ipfs_service import PinResult
from services.mint_service import MintService
from services.pricing_service import StaticRoleResolver

# ── Test Constants ───────────────────────────────────────────────────

NOW = 1_700_000_000
WEI = 10**18
ROLE_PRICES_WEI = [WEI // 100 * n for n in range(1, 7)]  # 0.01 … 0.06 ETH
CONTRACT_ADDRESS = "0xFf35268905302Ecf90b175E7277c59cFD471bBc3"
USER_ID = "80351110224678912"
USERNAME = "nelly"
WALLET = "0x000000000000000000000000000000000000dEaD"
FULL_ACCESS_ROLE_ID = "1073054714092073000"


# ── Fakes ────────────────────────────────────────────────────────────


class FakeLedger:
    """Stands in for LedgerClient; records every read."""

    def __init__(self, public_end: int = NOW + 3600, initial_price: int = WEI // 100):
        self.contract_address = CONTRACT_ADDRESS
        self.public_end = public_end
        self.initial_price = initial_price
        self.role_prices = list(ROLE_PRICES_WEI)
        self.fail = False
        self.calls: list[str] = []

    def _check(self, name: str):
        self.calls.append(name)
        if self.fail:
            raise ContractReadError(f"{name} failed: RPC unreachable")

    async def public_minting_end(self) -> int:
        self._check("PUBLIC_MINTING_END")
        return self.public_end

    async def initial_mint_price(self) -> int:
        self._check("INITIAL_MINT_PRICE")
        return self.initial_price

    async def role_price(self, tier: int) -> int:
        self._check(f"rolePrices({tier})")
        return self.role_prices[tier]

    async def network_status(self) -> dict:
        self._check("network_status")
        return {"chain_id": 11155111, "block_number": 5_000_000}


class FakePinata:
    """Stands in for PinataClient; CIDs are predictable."""

    def __init__(self):
        self.files: list[tuple[str, bytes]] = []
        self.documents: list[dict] = []
        self.fail_on: Optional[str] = None

    async def upload_file(self, file_bytes: bytes, filename: str, mimetype: str = "image/png") -> PinResult:
        if self.fail_on == "file":
            raise UploadError("Image upload to Pinata failed: 401 Unauthorized")
        self.files.append((filename, file_bytes))
        return PinResult(cid="QmImageHash", gateway_url="https://gateway.test/ipfs/QmImageHash")

    async def upload_json(self, document: dict, name: Optional[str] = None) -> PinResult:
        if self.fail_on == "json":
            raise UploadError("Metadata upload to Pinata failed: 500")
        self.documents.append(document)
        return PinResult(cid="QmMetadataHash", gateway_url="https://gateway.test/ipfs/QmMetadataHash")

    async def test_authentication(self) -> bool:
        return self.fail_on is None


class FakeDiscord:
    """Stands in for DiscordClient."""

    def __init__(self, profile: DiscordProfile):
        self.profile = profile
        self.fail = False
        self.codes: list[str] = []

    async def exchange_code(self, code: str) -> str:
        self.codes.append(code)
        if self.fail:
            raise UpstreamAuthError("OAuth code exchange failed: 400 invalid_grant")
        return "Bearer test-access-token"

    async def fetch_profile(self, authorization: str) -> DiscordProfile:
        return self.profile


class FakeAvatarFetcher:
    def __init__(self, image: Image.Image):
        self.image = image
        self.urls: list[str] = []

    async def __call__(self, url: str) -> Image.Image:
        self.urls.append(url)
        return self.image


# ── Fixtures ─────────────────────────────────────────────────────────


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        discord_client_id="test-client-id",
        discord_client_secret="test-client-secret",
        discord_redirect_uri="http://localhost:3000/auth/callback",
        discord_guild_id="1036887311436238000",
        pinata_api_key="test-key",
        pinata_secret_api_key="test-secret",
        nft_image_dir=str(tmp_path / "nft-images"),
    )


@pytest.fixture
def image_store(test_settings) -> ImageStore:
    return ImageStore(test_settings.nft_image_dir)


@pytest.fixture
def fake_ledger() -> FakeLedger:
    return FakeLedger()


@pytest.fixture
def fake_pinata() -> FakePinata:
    return FakePinata()


@pytest.fixture
def avatar_image() -> Image.Image:
    """Landscape 200x100 solid red avatar."""
    return Image.new("RGB", (200, 100), (255, 0, 0))


@pytest.fixture
def fake_discord() -> FakeDiscord:
    return FakeDiscord(
        DiscordProfile(
            id=USER_ID,
            username=USERNAME,
            discriminator="0",
            avatar="a1b2c3",
            roles=frozenset({FULL_ACCESS_ROLE_ID}),
        )
    )


@pytest.fixture
def fake_avatar_fetcher(avatar_image) -> FakeAvatarFetcher:
    return FakeAvatarFetcher(avatar_image)


@pytest.fixture
def mint_service(fake_ledger, fake_pinata, image_store) -> MintService:
    return MintService(
        ledger=fake_ledger,
        pinata=fake_pinata,
        image_store=image_store,
        role_resolver=StaticRoleResolver("Newbie"),
        clock=lambda: NOW,
    )


@pytest.fixture
def stored_image(image_store) -> bytes:
    """A previously generated image for USER_ID."""
    data = b"\x89PNG\r\n\x1a\nstored-image"
    image_store.save(USER_ID, data)
    return data


@pytest.fixture
def test_client(
    test_settings,
    image_store,
    fake_ledger,
    fake_pinata,
    fake_discord,
    fake_avatar_fetcher,
    mint_service,
) -> Generator[TestClient, None, None]:
    """
    FastAPI test client around a fresh app.

    Collaborator dependencies are overridden with the fakes above.
    """
    from main import create_app

    app = create_app(test_settings)
    app.dependency_overrides[get_image_store] = lambda: image_store
    app.dependency_overrides[get_ledger] = lambda: fake_ledger
    app.dependency_overrides[get_pinata] = lambda: fake_pinata
    app.dependency_overrides[get_discord_client] = lambda: fake_discord
    app.dependency_overrides[get_avatar_fetcher] = lambda: fake_avatar_fetcher
    app.dependency_overrides[get_mint_service] = lambda: mint_service

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
