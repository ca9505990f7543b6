from __future__ import annotations

import base64
import random
from typing import Any, Dict, List, Optional

from quote_ratio.venues import JUPITER_V6_PROGRAM_ID, Venue

TOKEN_PROGRAM = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
SYSTEM_PROGRAM = "11111111111111111111111111111111"

START_BLOCK_TIME = 1_735_000_000


def _pool_keys(count: int) -> List[str]:
    return [f"MockPool{index:03d}" for index in range(count)]


def _account(rng: random.Random, owner: str) -> Dict[str, Any]:
    raw = bytes(rng.getrandbits(8) for _ in range(32))
    return {
        "data": [base64.b64encode(raw).decode("ascii"), "base64"],
        "executable": False,
        "lamports": rng.randint(1_000_000, 5_000_000_000),
        "owner": owner,
        "rentEpoch": 18446744073709551615,
        "space": len(raw),
    }


def _swap_result(rng: random.Random, venue: Venue) -> Optional[Dict[str, Any]]:
    roll = rng.random()
    if roll < 0.05:
        return None
    exact_out = rng.randint(1_000_000, 900_000_000)
    out = int(exact_out * rng.uniform(0.97, 1.01))
    if roll < 0.08:
        out = exact_out * 20
    price = rng.uniform(0.5, 2.0) / 1_000_000
    legs = [{"amm": venue.display_name}]
    if roll > 0.92:
        legs.append({"amm": "Whirlpool"})
    elif 0.88 < roll <= 0.92:
        legs = [{"amm": "Meteora DLMM"}]
    return {
        "swapLegs": legs,
        "outAmount": str(out),
        "exactOutAmount": str(exact_out),
        "outAmountUSD": round(out * price, 6),
        "exactOutAmountUSD": round(exact_out * price, 6),
    }


def _transaction(
    rng: random.Random, index: int, signature: str, venue: Venue, pools: List[str]
) -> Dict[str, Any]:
    roll = rng.random()
    failed = roll < 0.1
    routed = roll >= 0.3
    instructions: List[Dict[str, Any]] = [{"programId": SYSTEM_PROGRAM, "parsed": {"type": "transfer"}}]
    if routed:
        instructions.append({"programId": JUPITER_V6_PROGRAM_ID, "accounts": [], "data": "mock"})
    else:
        instructions.append({"programId": venue.address, "accounts": [], "data": "mock"})

    tx: Dict[str, Any] = {
        "slot": 300_000_000 - index,
        "blockTime": START_BLOCK_TIME - index * 2,
        "meta": {"err": {"InstructionError": [1, {"Custom": 6001}]} if failed else None, "fee": 5000},
        "transaction": {
            "signatures": [signature],
            "message": {"accountKeys": [], "instructions": instructions},
        },
        "version": 0,
    }
    if routed and not failed:
        result = _swap_result(rng, venue)
        tx["mockSwap"] = {
            "accounts": rng.sample(pools, 2),
            "result": result,
        }
    return tx


def generate_seed(tx_count: int = 250, venue: Venue = Venue.OBRIC, seed: int = 7) -> Dict[str, Any]:
    """A deterministic newest-first history for ``venue.address``."""
    rng = random.Random(seed)
    pools = _pool_keys(12)
    signatures: List[Dict[str, Any]] = []
    transactions: Dict[str, Dict[str, Any]] = {}
    for index in range(tx_count):
        signature = f"MockSig{index:06d}"
        tx = _transaction(rng, index, signature, venue, pools)
        transactions[signature] = tx
        signatures.append(
            {
                "signature": signature,
                "slot": tx["slot"],
                "err": tx["meta"]["err"],
                "memo": None,
                "blockTime": tx["blockTime"],
                "confirmationStatus": "finalized",
            }
        )
    accounts = {key: _account(rng, TOKEN_PROGRAM) for key in pools}
    return {
        "venue": venue,
        "address": venue.address,
        "signatures": signatures,
        "transactions": transactions,
        "accounts": accounts,
    }
