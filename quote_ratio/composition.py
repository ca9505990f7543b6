from __future__ import annotations

from typing import Any, Dict, Optional

from quote_ratio.config import analysis_section
from quote_ratio.core.exceptions import ProviderMisconfigured
from quote_ratio.pipeline.runner import AnalysisSettings
from quote_ratio.rpc.provider import RpcSettings, SolanaRpcProvider
from quote_ratio.venues import JUPITER_V6_PROGRAM_ID, Venue, parse_address


def _pick(override: Optional[Any], section: Dict[str, Any], key: str, default: Any) -> Any:
    if override is not None:
        return override
    value = section.get(key)
    return default if value is None else value


def build_analysis_settings(
    target: str,
    config: Dict[str, Any],
    address: Optional[str] = None,
    pages: Optional[int] = None,
    page_size: Optional[int] = None,
    fetch_tx_delay_ms: Optional[int] = None,
    fetch_acc_delay_ms: Optional[int] = None,
) -> AnalysisSettings:
    section = analysis_section(config)
    try:
        venue = Venue.from_key(target.strip().lower())
    except ValueError as exc:
        raise ProviderMisconfigured(str(exc)) from exc

    if address:
        try:
            resolved_address = parse_address(address)
        except ValueError as exc:
            raise ProviderMisconfigured(f"{address} is not a valid address") from exc
    else:
        resolved_address = venue.address

    page_count = int(_pick(pages, section, "pages", 100))
    size = int(_pick(page_size, section, "page_size", 1000))
    if page_count < 0:
        raise ProviderMisconfigured("--pages must not be negative")
    if not 1 <= size <= 1000:
        raise ProviderMisconfigured("--page-size must be between 1 and 1000")

    return AnalysisSettings(
        venue=venue,
        address=resolved_address,
        page_count=page_count,
        page_size=size,
        fetch_tx_delay=float(_pick(fetch_tx_delay_ms, section, "fetch_tx_delay_ms", 0)) / 1000.0,
        fetch_acc_delay=float(_pick(fetch_acc_delay_ms, section, "fetch_acc_delay_ms", 0)) / 1000.0,
        router_program_id=str(section.get("router_program_id") or JUPITER_V6_PROGRAM_ID),
    )


def build_rpc_provider(config: Dict[str, Any], rpc_url: Optional[str] = None) -> SolanaRpcProvider:
    return SolanaRpcProvider(RpcSettings.from_env(config, rpc_url=rpc_url))


__all__ = ["build_analysis_settings", "build_rpc_provider"]
