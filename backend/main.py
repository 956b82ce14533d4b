"""
Discord PFP NFT Backend: FastAPI Application

Discord OAuth2 login, role-coloured profile-picture image generation,
IPFS pinning via Pinata and mint price lookup from the NFT contract.
"""
import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings, get_settings
from domain.errors import DomainError
from domain.responses import error_response
from exceptions import ConfigurationError
from routes import auth, health, mint

# ── Logging ─────────────────────────────────────────────────────────

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: validate config, build collaborators. Shutdown: stop executor."""
    from services.async_executor import shutdown_executor, start_executor
    from services.discord_service import DiscordClient
    from services.image_service import AvatarFetcher
    from services.image_store import ImageStore
    from services.ipfs_service import PinataClient
    from services.ledger_service import LedgerClient
    from services.mint_service import MintService
    from services.pricing_service import StaticRoleResolver

    settings: Settings = app.state.settings

    # Missing Discord credentials abort startup before any request is served
    settings.validate_required_settings()

    image_store = ImageStore(settings.nft_image_dir)
    image_store.ensure_root()

    start_executor(settings.ledger_max_workers)
    logger.info("Initializing provider and contract...")
    ledger = LedgerClient(settings.rpc_url, settings.contract_address)
    if settings.private_key:
        try:
            logger.info(f"Signer address: {settings.signer_address}")
        except ValueError as e:
            logger.warning(f"PRIVATE_KEY is not a valid key: {e}")
    pinata = PinataClient(
        api_key=settings.pinata_api_key,
        secret_api_key=settings.pinata_secret_api_key,
        api_base=settings.pinata_api_base,
        gateway=settings.pinata_gateway,
    )

    app.state.image_store = image_store
    app.state.ledger = ledger
    app.state.pinata = pinata
    app.state.discord = DiscordClient(settings)
    app.state.avatar_fetcher = AvatarFetcher()
    app.state.mint_service = MintService(
        ledger=ledger,
        pinata=pinata,
        image_store=image_store,
        role_resolver=StaticRoleResolver(settings.default_mint_role),
    )
    logger.info("Contract initialized successfully")

    yield  # app runs here

    shutdown_executor()
    logger.info("Shutting down")


# ── App Factory ─────────────────────────────────────────────────────

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application around one Settings instance."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Discord PFP NFT API",
        description="Discord profile-picture NFTs with role-based backgrounds and pricing",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(mint.router)

    # Generated images; the directory is created in lifespan
    app.mount(
        "/nft-images",
        StaticFiles(directory=settings.nft_image_dir, check_dir=False),
        name="nft-images",
    )

    _register_exception_handlers(app)
    return app


# ── Exception Handlers ──────────────────────────────────────────────

def _register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(DomainError)
    async def domain_exception_handler(request, exc: DomainError):
        """Validation (400) and mint preparation (500) failures."""
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(exc.message, exc.error),
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request, exc: RequestValidationError):
        """Malformed JSON bodies are client errors, reported like missing fields."""
        logger.warning(f"Invalid request on {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=400,
            content=error_response("Invalid request body"),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request, exc: StarletteHTTPException):
        """Keep the status code, wrap the payload."""
        detail = exc.detail
        message = detail if isinstance(detail, str) else "Request failed"
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(message),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """
        Catch-all for unhandled exceptions.

        The full traceback is logged server-side; clients get a generic message.
        """
        logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content=error_response("Internal server error"),
        )


app = create_app()


# ── Entrypoint ──────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    try:
        settings.validate_required_settings()
    except ConfigurationError as e:
        logger.error(f"{e} (missing: {', '.join(e.missing)})")
        sys.exit(1)

    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level="info")
