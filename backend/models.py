"""
Pydantic models for request/response validation.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ApiBase(BaseModel):
    """Shared base — allows construction by Python name or camelCase alias."""
    model_config = ConfigDict(populate_by_name=True)


# ── Mint Models ─────────────────────────────────────────────────────

class MintRequest(ApiBase):
    """
    Body of POST /mint.

    Fields are optional at the schema level so a missing value is reported
    as our own 400 "Missing required parameters" rather than a 422.
    """
    discord_username: Optional[str] = Field(default=None, alias="discordUsername")
    image_url: Optional[str] = Field(
        default=None,
        alias="imageUrl",
        description="Reference to the generated image, e.g. /nft-images/<userId>.png",
    )
    wallet_address: Optional[str] = Field(default=None, alias="walletAddress")
    check_only: bool = Field(default=False, alias="checkOnly")


class MintResponse(ApiBase):
    """Success body of POST /mint. Upload fields are absent for checkOnly."""
    success: bool = True
    price: str = Field(..., description="Mint price in ether, formatted like ethers.formatEther")
    metadata_hash: Optional[str] = Field(default=None, alias="metadataHash")
    image_hash: Optional[str] = Field(default=None, alias="imageHash")
    contract_address: Optional[str] = Field(default=None, alias="contractAddress")
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    metadata_url: Optional[str] = Field(default=None, alias="metadataUrl")


# ── Health Models ───────────────────────────────────────────────────

class HealthResponse(ApiBase):
    status: str
    ledger_connected: bool = Field(..., alias="ledgerConnected")
    chain_id: Optional[int] = Field(default=None, alias="chainId")
    block_number: Optional[int] = Field(default=None, alias="blockNumber")
    ipfs_authenticated: Optional[bool] = Field(default=None, alias="ipfsAuthenticated")
    contract_address: str = Field(..., alias="contractAddress")
    timestamp: str
