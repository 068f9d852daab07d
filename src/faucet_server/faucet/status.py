import logging
from typing import Optional

from faucet_server.chain import ChainClient, ChainError
from faucet_server.models import Confirmed, Pending, TransactionStatus, Unknown

from .errors import ConfigurationError, InvalidHashError

_logger = logging.getLogger(__name__)


class StatusChecker(object):
    """
    Looks up whether a transaction has been included in a block.

    Every call is an independent receipt query. Nothing is cached between
    calls, so the answer only changes when the chain does.
    """

    def __init__(self, chain: Optional[ChainClient]) -> None:
        self._chain = chain

    async def check(self, tx_hash: Optional[str]) -> TransactionStatus:
        if not tx_hash:
            raise InvalidHashError("Transaction hash is required")
        if self._chain is None:
            _logger.error("Faucet rpc endpoint is not configured")
            raise ConfigurationError("RPC URL not configured")

        try:
            receipt = await self._chain.get_transaction_receipt(tx_hash)
        except ChainError as e:
            _logger.error(f"Error checking transaction {tx_hash} status: {e}")
            return Unknown(tx_hash=tx_hash, reason=e.message)

        if receipt is None:
            return Pending(tx_hash=tx_hash)

        if receipt.status == 0:
            _logger.warning(f"Transaction {tx_hash} is reverted in block {receipt.block_number}")
        return Confirmed(tx_hash=receipt.tx_hash, block_number=receipt.block_number)
