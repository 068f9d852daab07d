class FaucetClientError(Exception):
    def __init__(self, status_code: int, method: str, message: str) -> None:
        self.status_code = status_code
        self.method = method
        self.message = message

    def __str__(self) -> str:
        return f"Faucet {self.method} failed: {self.status_code} {self.message}"


class FaucetTimeoutError(Exception):
    """The request was sent but no answer came back in time, its outcome is unknown."""

    def __init__(self, method: str, timeout: float) -> None:
        self.method = method
        self.timeout = timeout

    def __str__(self) -> str:
        return (
            f"Faucet {self.method} timed out after {self.timeout}s. "
            "The network might be congested or the RPC endpoint is unresponsive."
        )
