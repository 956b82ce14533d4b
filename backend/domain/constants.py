"""
Domain constants used across services/routers.
"""

# ── Generated image ─────────────────────────────────────────────────
CANVAS_SIZE = 1000
AVATAR_MAX_SIZE = 900

# Ordered (Discord role id, RGB fill) pairs; first match wins, so order
# is significant and must not become a dict.
APPEARANCE_RULES: tuple[tuple[str, tuple[int, int, int]], ...] = (
    ("1036887311436238858", (200, 188, 244)),
    ("1073054714092073000", (176, 156, 252)),
    ("1037873237159321612", (136, 108, 252)),
    ("1046330093569593418", (255, 140, 228)),
    ("1051562453495971941", (184, 60, 124)),
    ("1144287729862049903", (32, 188, 156)),
)
DEFAULT_FILL_COLOR = (0, 0, 0)

# ── Discord OAuth ───────────────────────────────────────────────────
DISCORD_AUTHORIZE_URL = "https://discord.com/api/oauth2/authorize"
DISCORD_OAUTH_SCOPE = "identify guilds guilds.members.read"

# ── IPFS metadata ───────────────────────────────────────────────────
IPFS_SCHEME = "ipfs://"
METADATA_NAME_TEMPLATE = "Profile Picture NFT for {username}"
METADATA_DESCRIPTION = "NFT minted from Discord profile picture"
