from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class RpcErrorBody(BaseModel):
    code: Optional[int] = None
    message: str = ""

    model_config = ConfigDict(extra="allow")


class RpcResponse(BaseModel):
    jsonrpc: str
    id: Optional[Union[int, str]] = None
    result: Any = None
    error: Optional[RpcErrorBody] = None

    model_config = ConfigDict(extra="allow")


class RpcSignatureInfo(BaseModel):
    signature: str
    slot: Optional[int] = None
    err: Optional[Any] = None
    memo: Optional[str] = None
    block_time: Optional[int] = Field(default=None, alias="blockTime")
    confirmation_status: Optional[str] = Field(default=None, alias="confirmationStatus")

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class RpcAccount(BaseModel):
    data: List[str]
    executable: bool = False
    lamports: int
    owner: str
    rent_epoch: Optional[int] = Field(default=None, alias="rentEpoch")
    space: Optional[int] = None

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class RpcMultipleAccounts(BaseModel):
    context: Dict[str, Any] = Field(default_factory=dict)
    value: List[Optional[RpcAccount]]

    model_config = ConfigDict(extra="allow")


__all__ = [
    "RpcAccount",
    "RpcErrorBody",
    "RpcMultipleAccounts",
    "RpcResponse",
    "RpcSignatureInfo",
]
