from abc import ABC, abstractmethod
from typing import Optional

from eth_typing import ChecksumAddress
from web3.types import TxParams, Wei

from faucet_server.models import TxReceiptInfo


class ChainClient(ABC):
    """ read """

    @abstractmethod
    async def get_block_number(self) -> int: ...

    @abstractmethod
    async def get_balance(self, address: ChecksumAddress) -> Wei: ...

    @abstractmethod
    async def get_chain_id(self) -> int: ...

    @abstractmethod
    async def get_gas_price(self) -> Wei: ...

    @abstractmethod
    async def get_transaction_count(self, address: ChecksumAddress) -> int:
        """Nonce of the next transaction, counting pending ones."""

    @abstractmethod
    async def estimate_gas(self, tx: TxParams) -> int: ...

    @abstractmethod
    async def get_transaction_receipt(self, tx_hash: str) -> Optional[TxReceiptInfo]:
        """Receipt of a mined transaction, None when it is not in a block yet."""

    """ write """

    @abstractmethod
    async def send_raw_transaction(self, raw_tx: bytes) -> str:
        """Broadcast a signed transaction and return its 0x-prefixed hash."""

    """ auxiliary """

    @abstractmethod
    async def close(self): ...
