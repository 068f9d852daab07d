from typing import Literal, Optional, Union

from pydantic import BaseModel, Field
from web3.types import Wei

__all__ = [
    "ErrorKind",
    "Submitted",
    "Rejected",
    "DispenseResult",
    "Pending",
    "Confirmed",
    "Unknown",
    "TransactionStatus",
    "GaveUp",
    "PollOutcome",
]


ErrorKind = Literal[
    "invalid_address",
    "invalid_hash",
    "cooldown",
    "network",
    "configuration",
    "insufficient",
    "broadcast",
    "timeout",
]


class Submitted(BaseModel):
    kind: Literal["submitted"] = "submitted"
    tx_hash: str = Field(min_length=1)
    amount: Wei
    message: str


class Rejected(BaseModel):
    kind: Literal["rejected"] = "rejected"
    error: ErrorKind
    reason: str
    status_code: int
    # seconds, set for cooldown rejections
    retry_after: Optional[int] = None


DispenseResult = Union[Submitted, Rejected]


class Pending(BaseModel):
    status: Literal["pending"] = "pending"
    tx_hash: str


class Confirmed(BaseModel):
    status: Literal["confirmed"] = "confirmed"
    tx_hash: str
    block_number: int


class Unknown(BaseModel):
    status: Literal["unknown"] = "unknown"
    tx_hash: str
    reason: str


TransactionStatus = Union[Pending, Confirmed, Unknown]


class GaveUp(BaseModel):
    """Still unconfirmed after the last poll, the transaction may confirm later."""

    status: Literal["gave_up"] = "gave_up"
    tx_hash: str
    attempts: int


PollOutcome = Union[Confirmed, GaveUp]
