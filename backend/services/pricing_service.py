"""
Pricing Service — decides what a mint costs.

Two regimes, split by the contract's PUBLIC_MINTING_END timestamp:
  - Public window (now <= end, inclusive): flat INITIAL_MINT_PRICE for all
  - Afterwards: rolePrices[tier], tier derived from the Discord role name

Both functions here are pure. The orchestrator performs the contract reads
and hands the values in.
"""
import logging
from typing import Mapping, Optional, Protocol, Sequence, TypeVar, Union

from domain.enums import RoleTier

logger = logging.getLogger(__name__)

P = TypeVar("P")

_ROLE_NAMES = {tier.name.lower(): int(tier) for tier in RoleTier}


def map_role(role_name: Optional[str]) -> int:
    """
    Map a role name to its tier code (case-insensitive).

    Unknown names and None map to 0, the lowest tier.
    """
    if not role_name:
        return int(RoleTier.NEWBIE)
    return _ROLE_NAMES.get(role_name.lower(), int(RoleTier.NEWBIE))


def is_public_window(now: int, public_mint_end: int) -> bool:
    """The boundary second itself still belongs to the public sale."""
    return now <= public_mint_end


def resolve_price(
    now: int,
    public_mint_end: int,
    initial_price: P,
    role: Optional[str],
    role_prices: Union[Sequence[P], Mapping[int, P]],
) -> P:
    """
    Resolve the price to charge for a mint.

    Args:
        now: Current unix time (seconds)
        public_mint_end: Cutover unix time from the contract
        initial_price: Flat public-sale price
        role: User's role name (may be None)
        role_prices: Tier-indexed price table; bounds are not checked here

    Returns:
        The price, in whatever unit the inputs use
    """
    if is_public_window(now, public_mint_end):
        return initial_price
    tier = map_role(role)
    logger.debug(f"Role pricing: role={role!r} tier={tier}")
    return role_prices[tier]


class RoleResolver(Protocol):
    """Looks up a user's highest role name for tiered pricing."""

    async def highest_role(self, username: str) -> Optional[str]: ...


class StaticRoleResolver:
    """Every user gets the same configured role."""

    def __init__(self, role: Optional[str] = "Newbie"):
        self.role = role

    async def highest_role(self, username: str) -> Optional[str]:
        return self.role
