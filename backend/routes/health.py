"""
Index page and health check endpoint.
"""
from datetime import datetime, timezone
import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import HTMLResponse, JSONResponse

from deps import get_ledger, get_pinata
from exceptions import ContractReadError
from models import HealthResponse
from services.ipfs_service import PinataClient
from services.ledger_service import LedgerClient
from utils.pages import render_index_page

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


@router.get("/", response_class=HTMLResponse)
async def index():
    """Human-readable endpoint listing."""
    return HTMLResponse(render_index_page())


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    response_model=HealthResponse,
    response_model_exclude_none=True,
)
async def health_check(
    ledger: LedgerClient = Depends(get_ledger),
    pinata: PinataClient = Depends(get_pinata),
):
    """Health check — verifies the RPC node answers and Pinata accepts our keys."""
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        network = await ledger.network_status()
    except ContractReadError as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "unhealthy",
                "ledgerConnected": False,
                "contractAddress": ledger.contract_address,
                "timestamp": timestamp,
            },
        )
    return {
        "status": "healthy",
        "ledgerConnected": True,
        "chainId": network["chain_id"],
        "blockNumber": network["block_number"],
        "ipfsAuthenticated": await pinata.test_authentication(),
        "contractAddress": ledger.contract_address,
        "timestamp": timestamp,
    }
