import logging
from typing import Awaitable, Callable, Optional

from anyio import get_cancelled_exc_class, sleep as anyio_sleep
from tenacity import (AsyncRetrying, RetryCallState, retry_if_result,
                      stop_after_attempt, wait_fixed)

from faucet_server.models import (Confirmed, GaveUp, PollOutcome,
                                  TransactionStatusResponse)

from .abc import FaucetClient

_logger = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


async def poll_transaction_status(
    client: FaucetClient,
    tx_hash: str,
    max_attempts: int = 20,
    interval: float = 5,
    sleep: SleepFunc = anyio_sleep,
) -> PollOutcome:
    """
    Query the transaction status until it is mined or the attempts run out.

    Every query counts as one attempt, including the ones that fail at the
    transport level. After ``max_attempts`` unconfirmed answers the poll gives
    up with GaveUp, which does not mean the transaction failed.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    async def _query() -> Optional[TransactionStatusResponse]:
        try:
            return await client.get_transaction_status(tx_hash)
        except get_cancelled_exc_class():
            raise
        except Exception as e:
            _logger.warning(f"Checking status of {tx_hash} failed: {e}")
            return None

    def _unconfirmed(resp: Optional[TransactionStatusResponse]) -> bool:
        return resp is None or resp.status != "success" or resp.block_number is None

    def _last_result(retry_state: RetryCallState) -> Optional[TransactionStatusResponse]:
        assert retry_state.outcome is not None
        return retry_state.outcome.result()

    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_fixed(interval),
        retry=retry_if_result(_unconfirmed),
        retry_error_callback=_last_result,
        sleep=sleep,
    )
    resp = await retrying(_query)

    if (
        resp is not None
        and resp.status == "success"
        and resp.block_number is not None
    ):
        _logger.info(f"Transaction {tx_hash} is mined in block {resp.block_number}")
        return Confirmed(tx_hash=resp.hash, block_number=resp.block_number)

    _logger.info(f"Transaction {tx_hash} is still pending after {max_attempts} attempts")
    return GaveUp(tx_hash=tx_hash, attempts=max_attempts)
