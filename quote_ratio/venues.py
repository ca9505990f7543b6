from __future__ import annotations

from enum import Enum

from solders.pubkey import Pubkey

JUPITER_V6_PROGRAM_ID = "JUP6LkbZbjS1jKKwapdHNy74zcZ3tLUZoi5QNyVTaV4"


class Venue(Enum):
    """Known venues: CLI key, swap-leg display name, program address."""

    OBRIC = ("obric", "Obric", "AvBSC1KmFNceHpD6jyyXBV6gMXFxZ8BJJ3HVUN8kCurJ")
    LIFINITY = ("lifinity", "Lifinity v2", "Gkt4BpMRFxhhrrVMQsewM74ggriAbxyN2yUYDD9qt1NV")
    SOLFI = ("solfi", "SolFi", "3nQAMo837oPuGCGELcw2wo7C9hUUchsMWCneiPHFFdur")

    def __init__(self, key: str, display_name: str, address: str) -> None:
        self.key = key
        self.display_name = display_name
        self.address = address

    @classmethod
    def keys(cls) -> list[str]:
        return [venue.key for venue in cls]

    @classmethod
    def from_key(cls, key: str) -> "Venue":
        for venue in cls:
            if venue.key == key:
                return venue
        raise ValueError(f"{key} is not a valid target name (choose from {', '.join(cls.keys())})")


def parse_address(address: str) -> str:
    """Normalize a base58 address, raising ValueError when it is not a public key."""
    return str(Pubkey.from_string(address.strip()))


__all__ = ["JUPITER_V6_PROGRAM_ID", "Venue", "parse_address"]
