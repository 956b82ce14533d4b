"""
IPFS Service — uploads NFT images and metadata to Pinata.

Pinata is a hosted IPFS pinning service. Content is addressed by its CID,
so re-uploading the same bytes is harmless and a failed mint attempt
leaves nothing behind that needs cleaning up.
"""
import json
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from domain.constants import IPFS_SCHEME, METADATA_DESCRIPTION, METADATA_NAME_TEMPLATE
from exceptions import UploadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PinResult:
    cid: str
    gateway_url: str

    @property
    def uri(self) -> str:
        """ipfs://<cid> form used inside metadata and API responses."""
        return f"{IPFS_SCHEME}{self.cid}"


def build_metadata(username: str, image_cid: str) -> dict:
    """Metadata document pinned alongside the image."""
    return {
        "name": METADATA_NAME_TEMPLATE.format(username=username),
        "description": METADATA_DESCRIPTION,
        "image": f"{IPFS_SCHEME}{image_cid}",
        "attributes": [],
    }


class PinataClient:
    """Thin async wrapper around the Pinata pinning API."""

    def __init__(
        self,
        api_key: str,
        secret_api_key: str,
        api_base: str = "https://api.pinata.cloud",
        gateway: str = "https://gateway.pinata.cloud/ipfs",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.secret_api_key = secret_api_key
        self.api_base = api_base.rstrip("/")
        self.gateway = gateway.rstrip("/")
        self._transport = transport

    def _get_headers(self) -> dict:
        """Build Pinata authentication headers."""
        if not self.api_key or not self.secret_api_key:
            raise UploadError(
                "Pinata API key and secret must be set in .env "
                "(PINATA_API_KEY, PINATA_SECRET_API_KEY)"
            )
        return {
            "pinata_api_key": self.api_key,
            "pinata_secret_api_key": self.secret_api_key,
        }

    def _client(self, timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=timeout, transport=self._transport)

    def _pin_result(self, response: httpx.Response) -> PinResult:
        try:
            cid = response.json()["IpfsHash"]
        except (ValueError, KeyError) as e:
            raise UploadError(f"Unexpected Pinata response: {response.text[:200]}") from e
        return PinResult(cid=cid, gateway_url=f"{self.gateway}/{cid}")

    async def test_authentication(self) -> bool:
        """Verify Pinata API credentials are valid."""
        try:
            async with self._client(timeout=10.0) as client:
                response = await client.get(
                    f"{self.api_base}/data/testAuthentication",
                    headers=self._get_headers(),
                )
                return response.status_code == 200
        except (httpx.HTTPError, UploadError) as e:
            logger.error(f"Pinata auth test failed: {e}")
            return False

    async def upload_file(
        self,
        file_bytes: bytes,
        filename: str,
        mimetype: str = "image/png",
    ) -> PinResult:
        """
        Upload a file to Pinata IPFS.

        Args:
            file_bytes: Raw file bytes
            filename: Filename shown in the Pinata dashboard
            mimetype: MIME type (default: 'image/png')

        Returns:
            PinResult with the CID
        """
        headers = self._get_headers()
        try:
            async with self._client(timeout=60.0) as client:
                response = await client.post(
                    f"{self.api_base}/pinning/pinFileToIPFS",
                    headers=headers,
                    files={"file": (filename, file_bytes, mimetype)},
                    data={"pinataMetadata": json.dumps({"name": filename})},
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise UploadError(f"Image upload to Pinata failed: {e}") from e

        result = self._pin_result(response)
        logger.info(f"IPFS Image Hash: {result.cid} ({len(file_bytes)} bytes)")
        return result

    async def upload_json(self, document: dict, name: Optional[str] = None) -> PinResult:
        """Pin a JSON document (NFT metadata) to IPFS."""
        headers = self._get_headers()
        headers["Content-Type"] = "application/json"

        payload = {"pinataContent": document}
        if name:
            payload["pinataMetadata"] = {"name": name}

        try:
            async with self._client(timeout=30.0) as client:
                response = await client.post(
                    f"{self.api_base}/pinning/pinJSONToIPFS",
                    headers=headers,
                    content=json.dumps(payload),
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise UploadError(f"Metadata upload to Pinata failed: {e}") from e

        result = self._pin_result(response)
        logger.info(f"IPFS Metadata Hash: {result.cid}")
        return result
