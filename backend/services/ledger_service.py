"""
Ledger Service — read-only access to the NFT contract on Sepolia.

Reads:
    PUBLIC_MINTING_END()  — cutover unix timestamp
    INITIAL_MINT_PRICE()  — public-sale price in wei
    rolePrices(uint8)     — tiered price in wei

web3.py calls are synchronous, so every read goes through run_blocking().
Any failure (RPC down, revert, bad ABI, bad contract address) surfaces as
ContractReadError on the read, never at startup.
"""
import logging
from decimal import Decimal, localcontext
from typing import Any, Callable, Optional

from web3 import Web3
from web3.contract import Contract

from contracts.abi import NFT_CONTRACT_ABI
from exceptions import ContractReadError
from services.async_executor import run_blocking

logger = logging.getLogger(__name__)

# uint256 has at most 78 decimal digits
_WEI_PRECISION = 80


def format_ether(wei: int) -> str:
    """
    Render a wei amount as an ether decimal string.

    Matches ethers' formatEther: no exponent, no rounding, at least one
    decimal place (10**16 -> "0.01", 10**18 -> "1.0").
    """
    with localcontext() as ctx:
        ctx.prec = _WEI_PRECISION
        value = Decimal(int(wei)).scaleb(-18).normalize()
        text = format(value, "f")
    if "." not in text:
        text += ".0"
    return text


class LedgerClient:
    """Read-only NFT contract handle, created once at startup."""

    def __init__(
        self,
        rpc_url: str,
        contract_address: str,
        abi: Optional[list] = None,
        w3: Optional[Web3] = None,
    ):
        self.w3 = w3 or Web3(Web3.HTTPProvider(rpc_url))
        self.abi = abi or NFT_CONTRACT_ABI
        self._contract: Optional[Contract] = None
        self._address_error: Optional[str] = None
        try:
            self.contract_address = Web3.to_checksum_address(contract_address)
            logger.info(f"Contract address: {self.contract_address}")
        except ValueError as e:
            # Pages and /health still show what was configured
            self.contract_address = contract_address
            self._address_error = f"Invalid contract address {contract_address!r}: {e}"
            logger.error(self._address_error)

    @property
    def contract(self) -> Contract:
        if self._address_error:
            raise ContractReadError(self._address_error)
        if self._contract is None:
            self._contract = self.w3.eth.contract(address=self.contract_address, abi=self.abi)
        return self._contract

    async def _read(self, label: str, call: Callable[[], Any]) -> Any:
        try:
            return await run_blocking(call)
        except Exception as e:
            logger.error(f"Contract read {label} failed: {e}")
            raise ContractReadError(f"{label} failed: {e}") from e

    async def public_minting_end(self) -> int:
        value = await self._read(
            "PUBLIC_MINTING_END",
            lambda: self.contract.functions.PUBLIC_MINTING_END().call(),
        )
        return int(value)

    async def initial_mint_price(self) -> int:
        value = await self._read(
            "INITIAL_MINT_PRICE",
            lambda: self.contract.functions.INITIAL_MINT_PRICE().call(),
        )
        return int(value)

    async def role_price(self, tier: int) -> int:
        value = await self._read(
            f"rolePrices({tier})",
            lambda: self.contract.functions.rolePrices(tier).call(),
        )
        return int(value)

    async def network_status(self) -> dict:
        """Chain id and latest block, for the health endpoint."""
        if self._address_error:
            raise ContractReadError(self._address_error)
        chain_id = await self._read("eth_chainId", lambda: self.w3.eth.chain_id)
        block = await self._read("eth_blockNumber", lambda: self.w3.eth.block_number)
        return {"chain_id": int(chain_id), "block_number": int(block)}
