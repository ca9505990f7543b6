from __future__ import annotations

import importlib
from typing import Any, Optional, Protocol

from quote_ratio.core.exceptions import ProviderMisconfigured
from quote_ratio.rpc.chain_provider import AccountInfoSource
from quote_ratio.rpc.types import ParsedTransaction


class Extractor(Protocol):
    """Decodes one transaction into a swap result.

    May be a plain function or a coroutine function. Returns a ``SwapResult``,
    a mapping or object with the same fields, or ``None`` when nothing decodes.
    """

    def __call__(
        self,
        signature: str,
        accounts: AccountInfoSource,
        transaction: ParsedTransaction,
        block_time: Optional[int],
    ) -> Any:
        ...


def load_extractor(path: Optional[str]) -> Extractor:
    """Resolve ``"package.module:attribute"`` to a callable."""
    if not path:
        raise ProviderMisconfigured("Please specify a swap extractor using --extractor module:function")
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ProviderMisconfigured(f"Extractor must look like 'package.module:function', got {path!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ProviderMisconfigured(f"Cannot import extractor module {module_name!r}") from exc
    target: Any = module
    for part in attr.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise ProviderMisconfigured(f"Extractor {path!r} not found") from exc
    if not callable(target):
        raise ProviderMisconfigured(f"Extractor {path!r} is not callable")
    return target


__all__ = ["Extractor", "load_extractor"]
