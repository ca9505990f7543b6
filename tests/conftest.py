"""
Shared fakes for pipeline tests: an in-memory chain provider and transaction builders.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import pytest

from quote_ratio.rpc.chain_provider import key_str
from quote_ratio.rpc.types import AccountInfo, ParsedTransaction, SignatureRecord
from quote_ratio.venues import JUPITER_V6_PROGRAM_ID

OTHER_PROGRAM = "11111111111111111111111111111111"


def make_tx(
    signature: str,
    routed: bool = True,
    failed: bool = False,
    block_time: Optional[int] = 1_700_000_000,
    **extra: Any,
) -> ParsedTransaction:
    program = JUPITER_V6_PROGRAM_ID if routed else OTHER_PROGRAM
    payload: Dict[str, Any] = {
        "slot": 1,
        "blockTime": block_time,
        "meta": {"err": {"InstructionError": [0, "Custom"]} if failed else None},
        "transaction": {
            "signatures": [signature],
            "message": {"instructions": [{"programId": OTHER_PROGRAM}, {"programId": program}]},
        },
    }
    payload.update(extra)
    return ParsedTransaction.model_validate(payload)


def make_account(owner: str = "Owner1111", lamports: int = 1) -> AccountInfo:
    return AccountInfo(owner=owner, lamports=lamports, data=b"\x01\x02")


class FakeChainProvider:
    """Newest-first history served in pages, recording every call."""

    def __init__(
        self,
        history: Sequence[ParsedTransaction],
        accounts: Optional[Dict[str, Optional[AccountInfo]]] = None,
        missing: Sequence[str] = (),
    ) -> None:
        self.history = list(history)
        self.accounts = accounts or {}
        self.missing = set(missing)
        self.signature_calls: List[Dict[str, Any]] = []
        self.transaction_calls: List[List[str]] = []
        self.account_calls: List[List[str]] = []

    async def list_signatures(self, address: str, limit: int, before: Optional[str] = None) -> List[SignatureRecord]:
        self.signature_calls.append({"address": address, "limit": limit, "before": before})
        start = 0
        if before is not None:
            start = [tx.signature for tx in self.history].index(before) + 1
        return [
            SignatureRecord(signature=tx.signature, block_time=tx.block_time, err=tx.meta.err if tx.meta else None)
            for tx in self.history[start : start + limit]
        ]

    async def get_transactions(self, signatures: Sequence[str]) -> List[Optional[ParsedTransaction]]:
        self.transaction_calls.append(list(signatures))
        by_signature = {tx.signature: tx for tx in self.history}
        return [None if sig in self.missing else by_signature[sig] for sig in signatures]

    async def get_accounts_info(self, keys: Sequence[Any]) -> List[Optional[AccountInfo]]:
        requested = [key_str(key) for key in keys]
        self.account_calls.append(requested)
        return [self.accounts.get(key) for key in requested]


class SleepRecorder:
    def __init__(self) -> None:
        self.calls: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.calls.append(delay)


@pytest.fixture
def history() -> List[ParsedTransaction]:
    return [make_tx(f"sig{index:03d}") for index in range(10)]


@pytest.fixture
def provider(history) -> FakeChainProvider:
    return FakeChainProvider(history)


@pytest.fixture
def sleep() -> SleepRecorder:
    return SleepRecorder()
