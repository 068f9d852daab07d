from .api import (AuthInput, AuthResponse, BalanceResponse, DispenseInput,
                  DispenseResponse, ErrorResponse, FaucetInfo,
                  TransactionStatusInput, TransactionStatusResponse)
from .chain import TxReceiptInfo
from .common import is_valid_address
from .faucet import (Confirmed, DispenseResult, ErrorKind, GaveUp, Pending,
                     PollOutcome, Rejected, Submitted, TransactionStatus,
                     Unknown)

__all__ = [
    "is_valid_address",
    "TxReceiptInfo",
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
    "DispenseInput",
    "DispenseResponse",
    "TransactionStatusInput",
    "TransactionStatusResponse",
    "ErrorResponse",
    "AuthInput",
    "AuthResponse",
    "FaucetInfo",
    "BalanceResponse",
]
