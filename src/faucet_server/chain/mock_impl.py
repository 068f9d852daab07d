from collections import Counter
from contextlib import asynccontextmanager
from typing import Dict, List, Optional

import rlp
from anyio import get_cancelled_exc_class, sleep
from eth_account import Account
from eth_typing import ChecksumAddress
from web3 import Web3
from web3.types import TxParams, Wei

from faucet_server.models import TxReceiptInfo

from .abc import ChainClient
from .exceptions import ChainError


class MockChainClient(ChainClient):
    """
    In-process chain for tests and dry runs.

    Every call is counted in ``calls``. A method listed in ``errors`` raises
    a ChainError with the given message, and one listed in ``delays`` sleeps
    first. Broadcast transactions stay pending until ``mine`` is called.
    """

    def __init__(
        self,
        block_number: int = 1,
        chain_id: int = 11155111,
        gas_price: int = Web3.to_wei(1, "gwei"),
    ) -> None:
        self.block_number = block_number
        self.chain_id = chain_id
        self.gas_price = Wei(gas_price)

        self.balances: Dict[ChecksumAddress, Wei] = {}
        self.nonces: Dict[ChecksumAddress, int] = {}
        self.sent_transactions: List[bytes] = []
        self.receipts: Dict[str, TxReceiptInfo] = {}

        self.errors: Dict[str, str] = {}
        self.delays: Dict[str, float] = {}
        self.calls: Counter = Counter()

        self._closed = False

    def set_balance(self, address: str, balance: int):
        self.balances[Web3.to_checksum_address(address)] = Wei(balance)

    def mine(self, tx_hash: str, block_number: Optional[int] = None) -> TxReceiptInfo:
        if block_number is None:
            self.block_number += 1
            block_number = self.block_number
        receipt = TxReceiptInfo(tx_hash=tx_hash, block_number=block_number)
        self.receipts[tx_hash] = receipt
        return receipt

    @asynccontextmanager
    async def record(self, method: str):
        self.calls[method] += 1
        if method in self.delays:
            await sleep(self.delays[method])
        try:
            if method in self.errors:
                raise ChainError(method=method, message=self.errors[method])
            yield
        except get_cancelled_exc_class():
            raise
        except ChainError:
            raise
        except Exception as e:
            raise ChainError(method=method, message=str(e)) from e

    async def get_block_number(self) -> int:
        async with self.record("getBlockNumber"):
            return self.block_number

    async def get_balance(self, address: ChecksumAddress) -> Wei:
        async with self.record("getBalance"):
            return self.balances.get(address, Wei(0))

    async def get_chain_id(self) -> int:
        async with self.record("getChainId"):
            return self.chain_id

    async def get_gas_price(self) -> Wei:
        async with self.record("getGasPrice"):
            return self.gas_price

    async def get_transaction_count(self, address: ChecksumAddress) -> int:
        async with self.record("getTransactionCount"):
            return self.nonces.get(address, 0)

    async def estimate_gas(self, tx: TxParams) -> int:
        async with self.record("estimateGas"):
            return 21000

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[TxReceiptInfo]:
        async with self.record("getTransactionReceipt"):
            return self.receipts.get(tx_hash)

    async def send_raw_transaction(self, raw_tx: bytes) -> str:
        async with self.record("sendRawTransaction"):
            sender = Account.recover_transaction(raw_tx)
            value = _decode_value(raw_tx)
            balance = self.balances.get(sender, Wei(0))
            if balance < value:
                raise ChainError(
                    method="sendRawTransaction",
                    message="insufficient funds for gas * price + value",
                )
            self.balances[sender] = Wei(balance - value)
            self.nonces[sender] = self.nonces.get(sender, 0) + 1
            self.sent_transactions.append(raw_tx)
            return Web3.to_hex(Web3.keccak(raw_tx))

    async def close(self):
        self._closed = True


def _decode_value(raw_tx: bytes) -> int:
    # typed transactions start with a type byte below 0x80
    if raw_tx[0] < 0x80:
        fields = rlp.decode(raw_tx[1:])
        # eip-2930: chainId, nonce, gasPrice, gas, to, value
        # eip-1559: chainId, nonce, maxPriorityFee, maxFee, gas, to, value
        index = 5 if raw_tx[0] == 1 else 6
    else:
        fields = rlp.decode(raw_tx)
        # legacy: nonce, gasPrice, gas, to, value
        index = 4
    return int.from_bytes(fields[index], "big")
