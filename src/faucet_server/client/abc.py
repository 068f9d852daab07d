from abc import ABC, abstractmethod

from faucet_server.models import DispenseResponse, TransactionStatusResponse


class FaucetClient(ABC):
    @abstractmethod
    async def request_tokens(self, address: str) -> DispenseResponse: ...

    @abstractmethod
    async def get_transaction_status(
        self, tx_hash: str
    ) -> TransactionStatusResponse: ...

    @abstractmethod
    async def close(self): ...
