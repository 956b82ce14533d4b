"""
Tests for API route endpoints through the FastAPI app.

Tests: index, login redirect, OAuth callback, POST /mint, image serving, health
"""
import io
from urllib.parse import urlparse

import pytest
from PIL import Image

from domain.constants import APPEARANCE_RULES
from services.discord_service import DiscordProfile
from tests.conftest import CONTRACT_ADDRESS, FULL_ACCESS_ROLE_ID, NOW, USER_ID, USERNAME, WALLET


def _mint_body(**overrides) -> dict:
    body = {
        "discordUsername": USERNAME,
        "imageUrl": f"/nft-images/{USER_ID}.png",
        "walletAddress": WALLET,
    }
    body.update(overrides)
    return {key: value for key, value in body.items() if value is not None}


class TestIndex:

    @pytest.mark.api
    def test_lists_endpoints(self, test_client):
        response = test_client.get("/")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "/login" in response.text
        assert "POST /mint" in response.text


class TestLogin:

    @pytest.mark.api
    def test_redirects_to_discord(self, test_client):
        response = test_client.get("/login", follow_redirects=False)
        assert response.status_code == 302
        location = urlparse(response.headers["location"])
        assert location.netloc == "discord.com"
        assert "client_id=test-client-id" in location.query


class TestAuthCallback:

    @pytest.mark.api
    def test_missing_code_is_400(self, test_client):
        response = test_client.get("/auth/callback")
        assert response.status_code == 400
        assert response.text == "No code provided"

    @pytest.mark.api
    def test_generates_and_saves_image(self, test_client, fake_discord, fake_avatar_fetcher, image_store):
        response = test_client.get("/auth/callback", params={"code": "abc"})

        assert response.status_code == 200
        assert f"Welcome, {USERNAME}!" in response.text
        assert f"/nft-images/{USER_ID}.png" in response.text
        assert CONTRACT_ADDRESS in response.text
        assert fake_discord.codes == ["abc"]
        assert fake_avatar_fetcher.urls == [
            f"https://cdn.discordapp.com/avatars/{USER_ID}/a1b2c3.png?size=1024"
        ]

        saved = Image.open(io.BytesIO(image_store.read(USER_ID))).convert("RGB")
        assert saved.size == (1000, 1000)
        assert saved.getpixel((0, 0)) == dict(APPEARANCE_RULES)[FULL_ACCESS_ROLE_ID]

    @pytest.mark.api
    def test_legacy_callback_path(self, test_client):
        response = test_client.get("/auth/discord/callback", params={"code": "abc"})
        assert response.status_code == 200

    @pytest.mark.api
    def test_username_is_escaped(self, test_client, fake_discord):
        fake_discord.profile = DiscordProfile(id=USER_ID, username="<script>alert(1)</script>")
        response = test_client.get("/auth/callback", params={"code": "abc"})
        assert response.status_code == 200
        assert "<script>alert(1)</script>" not in response.text
        assert "&lt;script&gt;" in response.text

    @pytest.mark.api
    def test_oauth_failure_is_500(self, test_client, fake_discord, image_store):
        fake_discord.fail = True
        response = test_client.get("/auth/callback", params={"code": "expired"})
        assert response.status_code == 500
        assert response.text == "Authentication failed. Please try again."
        assert not image_store.resolve(USER_ID).exists()

    @pytest.mark.api
    def test_generated_image_is_served(self, test_client):
        test_client.get("/auth/callback", params={"code": "abc"})
        response = test_client.get(f"/nft-images/{USER_ID}.png")
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert Image.open(io.BytesIO(response.content)).size == (1000, 1000)


class TestImages:

    @pytest.mark.api
    def test_unknown_image_is_404(self, test_client):
        assert test_client.get("/nft-images/nobody.png").status_code == 404


class TestMint:

    @pytest.mark.api
    def test_check_only_returns_price_only(self, test_client, fake_pinata):
        response = test_client.post("/mint", json=_mint_body(checkOnly=True))
        assert response.status_code == 200
        assert response.json() == {"success": True, "price": "0.01"}
        assert fake_pinata.files == []

    @pytest.mark.api
    def test_check_only_after_cutover_uses_tier_zero(self, test_client, fake_ledger):
        fake_ledger.public_end = NOW - 60
        fake_ledger.role_prices[0] = 5 * 10**16
        response = test_client.post("/mint", json=_mint_body(checkOnly=True))
        assert response.json() == {"success": True, "price": "0.05"}

    @pytest.mark.api
    def test_full_preparation(self, test_client, stored_image):
        response = test_client.post("/mint", json=_mint_body())
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["price"] == "0.01"
        assert data["metadataHash"] == "QmMetadataHash"
        assert data["imageHash"] == "QmImageHash"
        assert data["contractAddress"] == CONTRACT_ADDRESS
        assert data["imageUrl"].startswith("ipfs://")
        assert data["metadataUrl"].startswith("ipfs://")

    @pytest.mark.api
    @pytest.mark.parametrize("missing", ["discordUsername", "imageUrl", "walletAddress"])
    def test_missing_field_is_400(self, test_client, fake_ledger, missing):
        response = test_client.post("/mint", json=_mint_body(**{missing: None}))
        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["message"] == "Missing required parameters"
        assert fake_ledger.calls == []

    @pytest.mark.api
    def test_blank_field_is_400(self, test_client):
        response = test_client.post("/mint", json=_mint_body(walletAddress="  "))
        assert response.status_code == 400
        assert response.json()["success"] is False

    @pytest.mark.api
    def test_malformed_body_is_400(self, test_client):
        response = test_client.post(
            "/mint", content="{not json", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert response.json()["success"] is False

    @pytest.mark.api
    def test_missing_image_is_500(self, test_client, fake_pinata):
        response = test_client.post("/mint", json=_mint_body())
        assert response.status_code == 500
        data = response.json()
        assert data == {
            "success": False,
            "message": "Error preparing NFT mint",
            "error": data["error"],
        }
        assert "Could not read image" in data["error"]
        assert fake_pinata.files == []

    @pytest.mark.api
    def test_ledger_failure_is_500(self, test_client, fake_ledger):
        fake_ledger.fail = True
        response = test_client.post("/mint", json=_mint_body(checkOnly=True))
        assert response.status_code == 500
        assert response.json()["message"] == "Error preparing NFT mint"

    @pytest.mark.api
    def test_upload_failure_is_500(self, test_client, fake_pinata, stored_image):
        fake_pinata.fail_on = "file"
        response = test_client.post("/mint", json=_mint_body())
        assert response.status_code == 500
        assert "Pinata" in response.json()["error"]


class TestHealth:

    @pytest.mark.api
    def test_healthy(self, test_client):
        response = test_client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["chainId"] == 11155111
        assert data["contractAddress"] == CONTRACT_ADDRESS
        assert data["ipfsAuthenticated"] is True

    @pytest.mark.api
    def test_rejected_pinata_keys_reported(self, test_client, fake_pinata):
        fake_pinata.fail_on = "file"
        response = test_client.get("/health")
        assert response.status_code == 200
        assert response.json()["ipfsAuthenticated"] is False

    @pytest.mark.api
    def test_unreachable_rpc_is_503(self, test_client, fake_ledger):
        fake_ledger.fail = True
        response = test_client.get("/health")
        assert response.status_code == 503
        assert response.json()["ledgerConnected"] is False
