from __future__ import annotations

from typing import List, Optional, Protocol, Sequence, Union

from solders.pubkey import Pubkey

from quote_ratio.rpc.types import AccountInfo, ParsedTransaction, SignatureRecord

AccountKey = Union[str, Pubkey]


class ChainRpcProvider(Protocol):
    async def list_signatures(
        self, address: str, limit: int, before: Optional[str] = None
    ) -> List[SignatureRecord]:
        ...

    async def get_transactions(self, signatures: Sequence[str]) -> List[Optional[ParsedTransaction]]:
        ...

    async def get_accounts_info(self, keys: Sequence[AccountKey]) -> List[Optional[AccountInfo]]:
        ...


class AccountInfoSource(Protocol):
    """The only capability an extractor gets: batched account lookup."""

    async def get_multiple_accounts_info(self, keys: Sequence[AccountKey]) -> List[Optional[AccountInfo]]:
        ...


def key_str(key: AccountKey) -> str:
    return str(key)


__all__ = ["AccountInfoSource", "AccountKey", "ChainRpcProvider", "key_str"]
