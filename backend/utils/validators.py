"""
Input validation utilities for the mint API.
"""
from domain.errors import ValidationError
from models import MintRequest
from services.image_store import user_id_from_reference


def validate_mint_request(request: MintRequest) -> str:
    """
    Check the required mint fields and return the image owner's user id.

    Raises:
        ValidationError(400) if username, image reference or wallet is
        missing, or the image reference names no file
    """
    missing = [
        alias
        for alias, value in (
            ("discordUsername", request.discord_username),
            ("imageUrl", request.image_url),
            ("walletAddress", request.wallet_address),
        )
        if not value or not value.strip()
    ]
    if missing:
        raise ValidationError("Missing required parameters", field=", ".join(missing))

    user_id = user_id_from_reference(request.image_url)
    if not user_id or user_id in (".", ".."):
        raise ValidationError("Invalid image reference", field="imageUrl")
    return user_id
