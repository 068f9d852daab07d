from abc import ABC, abstractmethod

from eth_typing import ChecksumAddress
from web3.types import TxParams


class Signer(ABC):
    """Holds the dispenser credential and signs transfers with it."""

    @property
    @abstractmethod
    def address(self) -> ChecksumAddress: ...

    @abstractmethod
    async def sign_transaction(self, tx: TxParams) -> bytes:
        """Return the raw signed transaction, ready for broadcast."""
