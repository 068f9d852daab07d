from .abc import FaucetClient
from .exceptions import FaucetClientError, FaucetTimeoutError
from .mock_impl import MockFaucetClient
from .poller import poll_transaction_status
from .web_impl import WebFaucetClient

__all__ = [
    "FaucetClient",
    "FaucetClientError",
    "FaucetTimeoutError",
    "MockFaucetClient",
    "WebFaucetClient",
    "poll_transaction_status",
]
