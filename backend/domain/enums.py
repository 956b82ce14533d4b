"""
Domain enums (minimal set used for clarity in services).
"""

from enum import Enum, IntEnum


class RoleTier(IntEnum):
    """On-chain role index used by the contract's rolePrices table."""
    NEWBIE = 0
    FULLACCESS = 1
    NADS = 2
    NADOG = 3
    MON = 4
    COMMUNITYTEAM = 5


class MintStage(str, Enum):
    PRICE_RESOLVED = "PRICE_RESOLVED"
    CHECK_ONLY = "CHECK_ONLY"
    IMAGE_LOADED = "IMAGE_LOADED"
    IMAGE_UPLOADED = "IMAGE_UPLOADED"
    METADATA_UPLOADED = "METADATA_UPLOADED"
