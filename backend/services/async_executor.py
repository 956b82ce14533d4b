"""
Thread pool for web3.py contract reads.

HTTPProvider does blocking socket I/O, so LedgerClient hands every call to
run_blocking(). A price check issues at most two sequential reads and
/health two more, so a handful of workers covers concurrent requests;
LEDGER_MAX_WORKERS overrides the default.
"""
import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

DEFAULT_LEDGER_WORKERS = 4

T = TypeVar("T")

_executor: Optional[ThreadPoolExecutor] = None


def start_executor(max_workers: int = DEFAULT_LEDGER_WORKERS) -> ThreadPoolExecutor:
    """Create the ledger pool; replaces a pool left over from a previous app."""
    global _executor
    if _executor is not None:
        _executor.shutdown(wait=False)
    _executor = ThreadPoolExecutor(max_workers=max(1, max_workers), thread_name_prefix="web3-read")
    logger.info(f"Ledger read pool started with {max(1, max_workers)} workers")
    return _executor


async def run_blocking(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a synchronous web3 call off the event loop."""
    executor = _executor or start_executor()
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(executor, functools.partial(func, *args, **kwargs))


def shutdown_executor() -> None:
    """Wait for in-flight reads, then drop the pool."""
    global _executor
    if _executor is None:
        return
    _executor.shutdown(wait=True)
    _executor = None
    logger.info("Ledger read pool stopped")
