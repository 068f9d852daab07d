from .cooldown import CooldownCache, MemoryCooldownCache
from .dispenser import Dispenser
from .errors import (BroadcastError, ConfigurationError, CooldownError,
                     FaucetError, InsufficientFundsError, InvalidAddressError,
                     InvalidHashError, NetworkUnreachableError,
                     RequestTimeoutError)
from .status import StatusChecker

__all__ = [
    "Dispenser",
    "StatusChecker",
    "CooldownCache",
    "MemoryCooldownCache",
    "FaucetError",
    "InvalidAddressError",
    "InvalidHashError",
    "CooldownError",
    "NetworkUnreachableError",
    "ConfigurationError",
    "InsufficientFundsError",
    "BroadcastError",
    "RequestTimeoutError",
]