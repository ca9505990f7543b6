from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Dict, List, Optional, Sequence

from quote_ratio.core.exceptions import UpstreamBadResponse
from quote_ratio.core.log import get_logger
from quote_ratio.rpc.chain_provider import AccountInfoSource, AccountKey, ChainRpcProvider, key_str
from quote_ratio.rpc.types import AccountInfo

logger = get_logger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


class AccountInfoCache(AccountInfoSource):
    """Batched, deduplicating account lookup shared with the extractor.

    Entries (absent accounts included) are written once and kept for the life
    of the process. Every invocation issues at most one ``get_accounts_info``
    call, for the keys not seen before, and then waits ``delay`` seconds.
    """

    def __init__(self, provider: ChainRpcProvider, delay: float = 0.0, sleep: SleepFn = asyncio.sleep) -> None:
        self._provider = provider
        self.delay = max(0.0, delay)
        self._sleep = sleep
        self._cache: Dict[str, Optional[AccountInfo]] = {}
        self._lock = asyncio.Lock()
        self.network_calls = 0

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: AccountKey) -> bool:
        return key_str(key) in self._cache

    async def get_multiple_accounts_info(self, keys: Sequence[AccountKey]) -> List[Optional[AccountInfo]]:
        requested = [key_str(key) for key in keys]
        async with self._lock:
            missing = list(dict.fromkeys(key for key in requested if key not in self))
            if missing:
                infos = await self._provider.get_accounts_info(missing)
                self.network_calls += 1
                if len(infos) != len(missing):
                    raise UpstreamBadResponse(
                        f"account lookup returned {len(infos)} entries for {len(missing)} keys"
                    )
                for key, info in zip(missing, infos):
                    self._cache[key] = info
                logger.debug("account_cache_fill", requested=len(requested), fetched=len(missing), size=len(self))
                if self.delay:
                    await self._sleep(self.delay)

        return [self._cache[key] for key in requested]


__all__ = ["AccountInfoCache"]
