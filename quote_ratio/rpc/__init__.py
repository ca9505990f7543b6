from quote_ratio.rpc.chain_provider import AccountInfoSource, AccountKey, ChainRpcProvider
from quote_ratio.rpc.http_client import RpcHttpClient
from quote_ratio.rpc.provider import RpcSettings, SolanaRpcProvider
from quote_ratio.rpc.request_factory import SolanaRequestFactory
from quote_ratio.rpc.types import AccountInfo, ParsedTransaction, SignatureRecord

__all__ = [
    "AccountInfo",
    "AccountInfoSource",
    "AccountKey",
    "ChainRpcProvider",
    "ParsedTransaction",
    "RpcHttpClient",
    "RpcSettings",
    "SignatureRecord",
    "SolanaRequestFactory",
    "SolanaRpcProvider",
]
