"""
Mint endpoint — price check and mint preparation.

POST /mint with checkOnly=true only resolves the price. Without it the
stored image and its metadata are pinned to IPFS and the hashes returned;
the wallet then calls mintOwnNFT itself.
"""
import logging

from fastapi import APIRouter, Depends

from deps import get_mint_service
from domain.errors import MintPreparationError
from domain.responses import StandardErrorResponse, success_response
from models import MintRequest, MintResponse
from services.ledger_service import format_ether
from services.mint_service import MintService
from utils.validators import validate_mint_request

logger = logging.getLogger(__name__)

router = APIRouter(tags=["mint"])


@router.post(
    "/mint",
    response_model=MintResponse,
    response_model_by_alias=True,
    response_model_exclude_none=True,
    responses={400: {"model": StandardErrorResponse}, 500: {"model": StandardErrorResponse}},
)
async def mint(
    request: MintRequest,
    mint_service: MintService = Depends(get_mint_service),
):
    """
    Resolve the mint price, or fully prepare a mint.

    1. Validates discordUsername, imageUrl and walletAddress are present
    2. Resolves the price (flat before PUBLIC_MINTING_END, role tier after)
    3. checkOnly → returns {success, price}
    4. Otherwise pins image + metadata and returns their ipfs:// URLs
    """
    user_id = validate_mint_request(request)

    result = await mint_service.prepare(
        username=request.discord_username,
        user_id=user_id,
        check_only=request.check_only,
    )
    if not result.ok:
        logger.error(f"Detailed error in mint: {result.error!r}")
        raise MintPreparationError(error=str(result.error))

    context = result.context
    price = format_ether(context.price_wei)
    if request.check_only:
        return success_response(price=price)

    return success_response(
        price=price,
        metadataHash=context.metadata_pin.cid,
        imageHash=context.image_pin.cid,
        contractAddress=mint_service.contract_address,
        imageUrl=context.image_pin.uri,
        metadataUrl=context.metadata_pin.uri,
    )
