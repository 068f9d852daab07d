class ChainError(Exception):
    def __init__(self, method: str, message: str) -> None:
        self.method = method
        self.message = message

    def __str__(self) -> str:
        return f"Chain {self.method} failed: {self.message}"

    def __repr__(self) -> str:
        return f"ChainError(method={self.method}, message={self.message})"
