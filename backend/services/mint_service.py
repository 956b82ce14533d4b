"""
Mint Service — prepares everything the wallet needs to mint.

Pipeline (one attempt, nothing persisted between attempts):

    PRICE_RESOLVED ──(checkOnly)──> CHECK_ONLY
          │
          v
    IMAGE_LOADED -> IMAGE_UPLOADED -> METADATA_UPLOADED

Each step is wrapped by _attempt(), which turns the collaborator exceptions
(ContractReadError, ImageError, UploadError) into a failed StepOutcome
instead of letting them escape. The first failed step stops the pipeline.
The on-chain mint itself happens in the browser.
"""
import logging
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional

from domain.enums import MintStage
from exceptions import MintBackendError
from services.image_store import ImageStore
from services.ipfs_service import PinataClient, PinResult, build_metadata
from services.ledger_service import LedgerClient
from services.pricing_service import RoleResolver, is_public_window, map_role, resolve_price

logger = logging.getLogger(__name__)


@dataclass
class MintContext:
    """Values accumulated while the pipeline runs."""
    username: str
    user_id: str
    price_wei: Optional[int] = None
    image_bytes: Optional[bytes] = None
    image_pin: Optional[PinResult] = None
    metadata_pin: Optional[PinResult] = None


@dataclass(frozen=True)
class StepOutcome:
    stage: MintStage
    ok: bool
    error: Optional[MintBackendError] = None


@dataclass
class MintResult:
    context: MintContext
    outcomes: list[StepOutcome] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return all(outcome.ok for outcome in self.outcomes)

    @property
    def stage(self) -> Optional[MintStage]:
        """Last stage attempted (the failing one when not ok)."""
        return self.outcomes[-1].stage if self.outcomes else None

    @property
    def error(self) -> Optional[MintBackendError]:
        for outcome in self.outcomes:
            if not outcome.ok:
                return outcome.error
        return None


Step = Callable[[MintContext], Awaitable[None]]


class MintService:
    """Sequences price lookup, image load and IPFS uploads for one mint."""

    def __init__(
        self,
        ledger: LedgerClient,
        pinata: PinataClient,
        image_store: ImageStore,
        role_resolver: RoleResolver,
        clock: Callable[[], float] = time.time,
    ):
        self.ledger = ledger
        self.pinata = pinata
        self.image_store = image_store
        self.role_resolver = role_resolver
        self.clock = clock

    @property
    def contract_address(self) -> str:
        return self.ledger.contract_address

    async def prepare(self, username: str, user_id: str, check_only: bool = False) -> MintResult:
        """
        Run the mint pipeline.

        Args:
            username: Discord username (metadata name, role lookup)
            user_id: Discord user id (locates the stored image)
            check_only: Stop after the price is known

        Returns:
            MintResult; inspect .ok / .error rather than catching exceptions
        """
        context = MintContext(username=username, user_id=user_id)
        result = MintResult(context=context)

        steps: list[tuple[MintStage, Step]] = [(MintStage.PRICE_RESOLVED, self._resolve_price)]
        if check_only:
            steps.append((MintStage.CHECK_ONLY, _noop))
        else:
            steps += [
                (MintStage.IMAGE_LOADED, self._load_image),
                (MintStage.IMAGE_UPLOADED, self._upload_image),
                (MintStage.METADATA_UPLOADED, self._upload_metadata),
            ]

        for stage, step in steps:
            outcome = await _attempt(stage, step, context)
            result.outcomes.append(outcome)
            if not outcome.ok:
                logger.error(f"Mint for {username} failed at {stage.value}: {outcome.error}")
                break
        return result

    async def current_price(self, username: str) -> int:
        """Resolve the price in wei for this user right now."""
        now = int(self.clock())
        public_end = await self.ledger.public_minting_end()
        if is_public_window(now, public_end):
            initial = await self.ledger.initial_mint_price()
            return resolve_price(now, public_end, initial, None, {})

        role = await self.role_resolver.highest_role(username)
        tier = map_role(role)
        table = {tier: await self.ledger.role_price(tier)}
        return resolve_price(now, public_end, None, role, table)

    # ── Steps ──────────────────────────────────────────────────────

    async def _resolve_price(self, context: MintContext) -> None:
        context.price_wei = await self.current_price(context.username)

    async def _load_image(self, context: MintContext) -> None:
        context.image_bytes = self.image_store.read(context.user_id)

    async def _upload_image(self, context: MintContext) -> None:
        context.image_pin = await self.pinata.upload_file(
            context.image_bytes,
            filename=self.image_store.resolve(context.user_id).name,
            mimetype="image/png",
        )

    async def _upload_metadata(self, context: MintContext) -> None:
        metadata = build_metadata(context.username, context.image_pin.cid)
        context.metadata_pin = await self.pinata.upload_json(
            metadata, name=f"metadata_{context.user_id}"
        )
        logger.info(f"Full metadata: {metadata}")


async def _attempt(stage: MintStage, step: Step, context: MintContext) -> StepOutcome:
    try:
        await step(context)
    except MintBackendError as e:
        return StepOutcome(stage=stage, ok=False, error=e)
    return StepOutcome(stage=stage, ok=True)


async def _noop(context: MintContext) -> None:
    return None
