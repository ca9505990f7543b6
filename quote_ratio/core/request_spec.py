from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import urlencode


def _normalize_base(base_url: str) -> str:
    return base_url.rstrip("/")


def _normalize_path(path: str) -> str:
    if not path:
        return "/"
    if not path.startswith("/"):
        return f"/{path}"
    return path


def canonicalize_query(query: Dict[str, Any]) -> Dict[str, str]:
    normalized: Dict[str, str] = {}
    for key, value in query.items():
        if value is None:
            continue
        normalized[key] = str(value)
    return normalized


@dataclass(frozen=True)
class RequestSpec:
    method: str
    base_url: str
    path: str
    query: Dict[str, Any]
    headers: Dict[str, str]
    json: Optional[Any] = None

    def normalized_query(self) -> Dict[str, str]:
        return canonicalize_query(self.query)

    def build_url(self, include_query: bool = True) -> str:
        base = _normalize_base(self.base_url)
        path = _normalize_path(self.path)
        url = f"{base}{path}"
        if include_query and self.query:
            query = urlencode(sorted(self.normalized_query().items()))
            if query:
                url = f"{url}?{query}"
        return url


@dataclass(frozen=True)
class JsonRpcSpec:
    """A JSON-RPC POST; ``body`` is a single call or a batch (list of calls)."""

    base_url: str
    path: str
    query: Dict[str, Any]
    headers: Dict[str, str]
    body: Any

    def to_request_spec(self) -> RequestSpec:
        return RequestSpec(
            method="POST",
            base_url=self.base_url,
            path=self.path,
            query=self.query,
            headers=self.headers,
            json=self.body,
        )


__all__ = [
    "JsonRpcSpec",
    "RequestSpec",
    "canonicalize_query",
]
