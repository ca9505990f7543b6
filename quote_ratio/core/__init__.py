from quote_ratio.core.exceptions import (
    ProviderMisconfigured,
    RpcError,
    UpstreamBadResponse,
    UpstreamError,
    UpstreamRateLimited,
)
from quote_ratio.core.request_spec import JsonRpcSpec, RequestSpec, canonicalize_query

__all__ = [
    "JsonRpcSpec",
    "ProviderMisconfigured",
    "RequestSpec",
    "RpcError",
    "UpstreamBadResponse",
    "UpstreamError",
    "UpstreamRateLimited",
    "canonicalize_query",
]
