from __future__ import annotations

from typing import Any, Dict, Optional, Sequence
from urllib.parse import parse_qsl, urlparse, urlunparse

from quote_ratio.core.request_spec import JsonRpcSpec


class SolanaRequestFactory:
    def __init__(
        self,
        rpc_url: str,
        api_key: str = "",
        commitment: Optional[str] = None,
        account_commitment: str = "processed",
    ) -> None:
        parts = urlparse(rpc_url.strip())
        self.rpc_url = urlunparse((parts.scheme, parts.netloc, "", "", "", "")).rstrip("/")
        self.path = parts.path or "/"
        self.url_query: Dict[str, Any] = dict(parse_qsl(parts.query))
        self.api_key = (api_key or "").strip()
        self.commitment = commitment
        self.account_commitment = account_commitment

    def build_rpc_request(self, method: str, params: Optional[list] = None, request_id: int = 1) -> JsonRpcSpec:
        return self._spec(self._call(method, params, request_id))

    def build_rpc_batch_request(self, method: str, params_list: Sequence[list], first_id: int = 1) -> JsonRpcSpec:
        body = [self._call(method, params, first_id + offset) for offset, params in enumerate(params_list)]
        return self._spec(body)

    def build_signatures_request(self, address: str, limit: int, before: Optional[str] = None) -> JsonRpcSpec:
        options: Dict[str, Any] = {"limit": int(limit)}
        if self.commitment:
            options["commitment"] = self.commitment
        if before is not None:
            options["before"] = before
        return self.build_rpc_request("getSignaturesForAddress", [address, options])

    def build_transactions_request(self, signatures: Sequence[str]) -> JsonRpcSpec:
        options: Dict[str, Any] = {"encoding": "jsonParsed", "maxSupportedTransactionVersion": 0}
        if self.commitment:
            options["commitment"] = self.commitment
        return self.build_rpc_batch_request("getTransaction", [[signature, options] for signature in signatures])

    def build_multiple_accounts_request(self, keys: Sequence[str]) -> JsonRpcSpec:
        options = {"encoding": "base64", "commitment": self.account_commitment}
        return self.build_rpc_request("getMultipleAccounts", [list(keys), options])

    def _call(self, method: str, params: Optional[list], request_id: int) -> Dict[str, Any]:
        return {
            "jsonrpc": "2.0",
            "id": request_id,
            "method": method,
            "params": params or [],
        }

    def _spec(self, body: Any) -> JsonRpcSpec:
        query = dict(self.url_query)
        if self.api_key:
            query["api-key"] = self.api_key
        return JsonRpcSpec(
            base_url=self.rpc_url,
            path=self.path,
            query=query,
            headers={"Content-Type": "application/json"},
            body=body,
        )


__all__ = ["SolanaRequestFactory"]
