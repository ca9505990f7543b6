from __future__ import annotations

import base64
import binascii
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

from pydantic import ValidationError

from quote_ratio.core.exceptions import ProviderMisconfigured, RpcError, UpstreamBadResponse
from quote_ratio.core.log import get_logger
from quote_ratio.rpc.chain_provider import AccountKey, ChainRpcProvider, key_str
from quote_ratio.rpc.http_client import RpcHttpClient
from quote_ratio.rpc.request_factory import SolanaRequestFactory
from quote_ratio.rpc.schemas import RpcAccount, RpcMultipleAccounts, RpcResponse, RpcSignatureInfo
from quote_ratio.rpc.types import AccountInfo, ParsedTransaction, SignatureRecord

T = TypeVar("T")

logger = get_logger(__name__)


def _env_float(name: str, default: Any) -> float:
    raw = os.getenv(name, "").strip()
    return float(raw) if raw else float(default)


@dataclass(frozen=True)
class RpcSettings:
    rpc_url: str
    api_key: str
    timeout: float
    rps: float
    max_retries: int
    backoff_base: float
    backoff_max: float

    @classmethod
    def from_env(cls, config: Optional[Dict[str, Any]] = None, rpc_url: Optional[str] = None) -> "RpcSettings":
        rpc_cfg = (config or {}).get("rpc") or {}
        url = (rpc_url or os.getenv("SOLANA_RPC_URL", "") or rpc_cfg.get("url") or "").strip()
        if not url:
            raise ProviderMisconfigured("Please specify an RPC url using --rpc or SOLANA_RPC_URL")
        return cls(
            rpc_url=url,
            api_key=os.getenv("SOLANA_RPC_API_KEY", "").strip(),
            timeout=_env_float("SOLANA_RPC_TIMEOUT", rpc_cfg.get("timeout_sec", 30)),
            rps=_env_float("SOLANA_RPC_RPS", rpc_cfg.get("rps", 10)),
            max_retries=int(_env_float("SOLANA_RPC_MAX_RETRIES", rpc_cfg.get("max_retries", 0))),
            backoff_base=float(rpc_cfg.get("backoff_base_sec", 0.5)),
            backoff_max=float(rpc_cfg.get("backoff_max_sec", 8)),
        )


def _validate_model(payload: Any, model: Type[T], context: str) -> T:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise UpstreamBadResponse(f"RPC {context} response invalid") from exc


def signature_record_from_rpc(info: RpcSignatureInfo) -> SignatureRecord:
    return SignatureRecord(signature=info.signature, block_time=info.block_time, err=info.err)


def account_info_from_rpc(account: Optional[RpcAccount]) -> Optional[AccountInfo]:
    if account is None:
        return None
    if len(account.data) != 2 or account.data[1] != "base64":
        raise UpstreamBadResponse("RPC account data is not base64 encoded")
    try:
        data = base64.b64decode(account.data[0])
    except (binascii.Error, ValueError) as exc:
        raise UpstreamBadResponse("RPC account data is not valid base64") from exc
    return AccountInfo(
        owner=account.owner,
        lamports=account.lamports,
        data=data,
        executable=account.executable,
        rent_epoch=account.rent_epoch,
    )


class SolanaRpcProvider(ChainRpcProvider):
    def __init__(self, settings: RpcSettings, http_client: Optional[RpcHttpClient] = None) -> None:
        self.settings = settings
        self.request_factory = SolanaRequestFactory(rpc_url=settings.rpc_url, api_key=settings.api_key)
        self._client = http_client or RpcHttpClient(
            timeout=settings.timeout,
            rps=settings.rps,
            max_retries=settings.max_retries,
            backoff_base=settings.backoff_base,
            backoff_max=settings.backoff_max,
        )
        self._owns_client = http_client is None

    async def __aenter__(self) -> "SolanaRpcProvider":
        await self._client.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_client:
            await self._client.__aexit__(exc_type, exc, tb)

    async def list_signatures(
        self, address: str, limit: int, before: Optional[str] = None
    ) -> List[SignatureRecord]:
        spec = self.request_factory.build_signatures_request(address, limit=limit, before=before)
        result = self._unwrap("getSignaturesForAddress", await self._client.request(spec))
        if not isinstance(result, list):
            raise UpstreamBadResponse("RPC getSignaturesForAddress response invalid")
        infos = [_validate_model(item, RpcSignatureInfo, "getSignaturesForAddress") for item in result]
        return [signature_record_from_rpc(info) for info in infos]

    async def get_transactions(self, signatures: Sequence[str]) -> List[Optional[ParsedTransaction]]:
        if not signatures:
            return []
        spec = self.request_factory.build_transactions_request(signatures)
        payload = await self._client.request(spec)
        if not isinstance(payload, list):
            if isinstance(payload, dict):
                self._unwrap("getTransaction", payload)
            raise UpstreamBadResponse("RPC getTransaction batch response invalid")

        by_id: Dict[Any, RpcResponse] = {}
        for item in payload:
            response = _validate_model(item, RpcResponse, "getTransaction")
            by_id[response.id] = response

        txs: List[Optional[ParsedTransaction]] = []
        for call in spec.body:
            response = by_id.get(call["id"])
            if response is None:
                raise UpstreamBadResponse(f"RPC getTransaction batch missing id {call['id']}")
            result = self._unwrap_response("getTransaction", response)
            if result is None:
                txs.append(None)
                continue
            txs.append(_validate_model(result, ParsedTransaction, "getTransaction"))
        return txs

    async def get_accounts_info(self, keys: Sequence[AccountKey]) -> List[Optional[AccountInfo]]:
        if not keys:
            return []
        requested = [key_str(key) for key in keys]
        spec = self.request_factory.build_multiple_accounts_request(requested)
        result = self._unwrap("getMultipleAccounts", await self._client.request(spec))
        accounts = _validate_model(result, RpcMultipleAccounts, "getMultipleAccounts")
        if len(accounts.value) != len(requested):
            raise UpstreamBadResponse(
                f"RPC getMultipleAccounts returned {len(accounts.value)} entries for {len(requested)} keys"
            )
        logger.debug("accounts_fetched", count=len(requested))
        return [account_info_from_rpc(account) for account in accounts.value]

    def _unwrap(self, method: str, payload: Any) -> Any:
        response = _validate_model(payload, RpcResponse, method)
        return self._unwrap_response(method, response)

    def _unwrap_response(self, method: str, response: RpcResponse) -> Any:
        if response.error is not None:
            raise RpcError(method, response.error.code, response.error.message)
        return response.result


__all__ = [
    "RpcSettings",
    "SolanaRpcProvider",
    "account_info_from_rpc",
    "signature_record_from_rpc",
]
