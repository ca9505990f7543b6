from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class SignatureRecord(BaseModel):
    signature: str
    block_time: Optional[int] = None
    err: Optional[Any] = None

    model_config = ConfigDict(frozen=True)

    @property
    def failed(self) -> bool:
        return self.err is not None


class ParsedInstruction(BaseModel):
    program_id: str = Field(alias="programId")

    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)


class TransactionMessage(BaseModel):
    instructions: List[ParsedInstruction] = Field(default_factory=list)
    account_keys: List[Any] = Field(default_factory=list, alias="accountKeys")

    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)


class TransactionBody(BaseModel):
    signatures: List[str] = Field(min_length=1)
    message: TransactionMessage

    model_config = ConfigDict(extra="allow", frozen=True)


class TransactionMeta(BaseModel):
    err: Optional[Any] = None

    model_config = ConfigDict(extra="allow", frozen=True)


class ParsedTransaction(BaseModel):
    """A transaction as returned by ``getTransaction`` with ``jsonParsed`` encoding.

    Only the fields the pipeline inspects are typed; everything else the node
    sends is kept as extra data for the extractor.
    """

    slot: Optional[int] = None
    block_time: Optional[int] = Field(default=None, alias="blockTime")
    meta: Optional[TransactionMeta] = None
    transaction: TransactionBody
    version: Optional[Any] = None

    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    @property
    def signature(self) -> str:
        return self.transaction.signatures[0]

    @property
    def failed(self) -> bool:
        return self.meta is not None and self.meta.err is not None

    def invokes(self, program_id: str) -> bool:
        return any(ix.program_id == program_id for ix in self.transaction.message.instructions)


class AccountInfo(BaseModel):
    owner: str
    lamports: int
    data: bytes
    executable: bool = False
    rent_epoch: Optional[int] = None

    model_config = ConfigDict(frozen=True)


__all__ = [
    "AccountInfo",
    "ParsedInstruction",
    "ParsedTransaction",
    "SignatureRecord",
    "TransactionBody",
    "TransactionMessage",
    "TransactionMeta",
]
