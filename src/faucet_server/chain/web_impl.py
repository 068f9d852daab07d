import logging
from contextlib import asynccontextmanager
from typing import Optional

from anyio import get_cancelled_exc_class
from eth_typing import ChecksumAddress
from web3 import Web3
from web3.exceptions import TransactionNotFound
from web3.providers.async_base import AsyncBaseProvider
from web3.types import TxParams, Wei

from faucet_server.models import TxReceiptInfo

from .abc import ChainClient
from .exceptions import ChainError
from .w3_pool import W3Pool

_logger = logging.getLogger(__name__)


def _error_message(e: Exception) -> str:
    # web3 rpc errors keep the node's message in `message`
    message = getattr(e, "message", None)
    if isinstance(message, str) and len(message) > 0:
        return message
    message = str(e)
    if len(message) == 0:
        message = type(e).__name__
    return message


@asynccontextmanager
async def wrap_error(method: str):
    try:
        yield
    except get_cancelled_exc_class():
        raise
    except ChainError:
        raise
    except Exception as e:
        raise ChainError(method=method, message=_error_message(e)) from e


class Web3ChainClient(ChainClient):
    def __init__(
        self,
        provider: Optional[AsyncBaseProvider] = None,
        provider_path: Optional[str] = None,
        pool_size: int = 5,
        timeout: int = 10,
    ) -> None:
        if provider is not None:
            pool_size = 1

        self._w3_pool = W3Pool(
            provider=provider,
            provider_path=provider_path,
            pool_size=pool_size,
            timeout=timeout,
        )
        self._closed = False

    async def get_block_number(self) -> int:
        async with wrap_error("getBlockNumber"):
            async with await self._w3_pool.get() as w3:
                return await w3.eth.get_block_number()

    async def get_balance(self, address: ChecksumAddress) -> Wei:
        async with wrap_error("getBalance"):
            async with await self._w3_pool.get() as w3:
                return await w3.eth.get_balance(address)

    async def get_chain_id(self) -> int:
        async with wrap_error("getChainId"):
            async with await self._w3_pool.get() as w3:
                return await w3.eth.chain_id

    async def get_gas_price(self) -> Wei:
        async with wrap_error("getGasPrice"):
            async with await self._w3_pool.get() as w3:
                return await w3.eth.gas_price

    async def get_transaction_count(self, address: ChecksumAddress) -> int:
        async with wrap_error("getTransactionCount"):
            async with await self._w3_pool.get() as w3:
                return await w3.eth.get_transaction_count(
                    address, block_identifier="pending"
                )

    async def estimate_gas(self, tx: TxParams) -> int:
        async with wrap_error("estimateGas"):
            async with await self._w3_pool.get() as w3:
                return await w3.eth.estimate_gas(tx)

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[TxReceiptInfo]:
        async with wrap_error("getTransactionReceipt"):
            async with await self._w3_pool.get() as w3:
                try:
                    receipt = await w3.eth.get_transaction_receipt(tx_hash)  # type: ignore
                except TransactionNotFound:
                    return None
                return TxReceiptInfo(
                    tx_hash=Web3.to_hex(receipt["transactionHash"]),
                    block_number=receipt["blockNumber"],
                    status=receipt["status"],
                )

    async def send_raw_transaction(self, raw_tx: bytes) -> str:
        async with wrap_error("sendRawTransaction"):
            async with await self._w3_pool.get() as w3:
                tx_hash = await w3.eth.send_raw_transaction(raw_tx)
                _logger.debug(f"raw transaction {Web3.to_hex(tx_hash)} is sent")
                return Web3.to_hex(tx_hash)

    async def close(self):
        if not self._closed:
            await self._w3_pool.close()
            self._closed = True

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return await self.close()
