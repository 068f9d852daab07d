from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class DispenseInput(BaseModel):
    address: Optional[str] = None


class DispenseResponse(BaseModel):
    status: Literal["pending"] = "pending"
    hash: str
    message: str


class TransactionStatusInput(BaseModel):
    hash: Optional[str] = None


class TransactionStatusResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: Literal["success", "pending"]
    hash: str
    block_number: Optional[int] = Field(None, alias="blockNumber")
    message: str


class ErrorResponse(BaseModel):
    error: str


class AuthInput(BaseModel):
    password: str = ""


class AuthResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None


class FaucetInfo(BaseModel):
    address: str
    # ETH, None when the chain cannot be queried
    balance: Optional[str] = None
    amount: str
    cooldown_minutes: Optional[float] = None
    password_required: bool = False


class BalanceResponse(BaseModel):
    address: str
    balance: str
