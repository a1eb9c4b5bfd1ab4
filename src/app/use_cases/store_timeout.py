"""Bounded store access for use cases"""

import asyncio
import functools
import logging
from src.app.errors import StoreTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_STORE_TIMEOUT_SECONDS = 10.0


def with_store_timeout(apply):
    """
    Run the store section ``apply`` under ``self.timeout_seconds``

    Decorate the method that reads, writes and commits; change publication
    stays outside it so a slow notifier never turns a committed mutation
    into a STORE_ERROR. On expiry StoreTimeoutError is raised and the caller
    rolls back like for any other LedgerError.
    """

    @functools.wraps(apply)
    async def wrapper(self, *args, **kwargs):
        try:
            return await asyncio.wait_for(apply(self, *args, **kwargs), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.error(f"{type(self).__name__} timed out after {self.timeout_seconds}s")
            raise StoreTimeoutError(
                "Store operation timed out",
                reason=f"timeout={self.timeout_seconds}s",
            )

    return wrapper
