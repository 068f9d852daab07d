from faucet_server.models import ErrorKind

__all__ = [
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


class FaucetError(Exception):
    kind: ErrorKind
    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message})"


# user input errors, safe to show as is and never retried by the server


class InvalidAddressError(FaucetError):
    kind = "invalid_address"
    status_code = 400


class InvalidHashError(FaucetError):
    kind = "invalid_hash"
    status_code = 400


class CooldownError(FaucetError):
    kind = "cooldown"
    status_code = 429

    def __init__(self, message: str, retry_after: int) -> None:
        super().__init__(message)
        self.retry_after = retry_after


# transient, the caller may resubmit


class NetworkUnreachableError(FaucetError):
    kind = "network"


class RequestTimeoutError(FaucetError):
    """The call was in flight when the deadline passed, its outcome is unknown."""

    kind = "timeout"
    status_code = 504


# operator errors, resubmitting does not help


class ConfigurationError(FaucetError):
    kind = "configuration"


class InsufficientFundsError(FaucetError):
    kind = "insufficient"


class BroadcastError(FaucetError):
    kind = "broadcast"
