from __future__ import annotations

from typing import Any, Dict, Optional

from quote_ratio.rpc.chain_provider import AccountInfoSource
from quote_ratio.rpc.types import ParsedTransaction


async def extract(
    signature: str,
    accounts: AccountInfoSource,
    transaction: ParsedTransaction,
    block_time: Optional[int],
) -> Optional[Dict[str, Any]]:
    """Reads the swap baked into seeded transactions, touching its pool accounts."""
    swap = (transaction.model_extra or {}).get("mockSwap")
    if swap is None:
        return None
    infos = await accounts.get_multiple_accounts_info(swap["accounts"])
    if any(info is None for info in infos):
        raise ValueError(f"pool account missing for {signature}")
    return swap["result"]
