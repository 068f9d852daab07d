from typing import List, Optional, Union

from faucet_server.models import DispenseResponse, TransactionStatusResponse

from .abc import FaucetClient

StatusReply = Union[TransactionStatusResponse, Exception]


class MockFaucetClient(FaucetClient):
    """
    Replays scripted status replies, one per call.

    A reply may be an exception, which is raised instead. Once the script is
    used up every further call answers pending.
    """

    def __init__(self, replies: Optional[List[StatusReply]] = None) -> None:
        self.replies: List[StatusReply] = list(replies or [])
        self.requested: List[str] = []
        self.status_calls = 0

    async def request_tokens(self, address: str) -> DispenseResponse:
        self.requested.append(address)
        return DispenseResponse(
            hash="0x" + "00" * 32,
            message=f"Transaction submitted. Sending 0.05 ETH to {address}",
        )

    async def get_transaction_status(self, tx_hash: str) -> TransactionStatusResponse:
        self.status_calls += 1
        if len(self.replies) > 0:
            reply = self.replies.pop(0)
            if isinstance(reply, Exception):
                raise reply
            return reply
        return TransactionStatusResponse(
            status="pending", hash=tx_hash, message="Transaction is still pending"
        )

    async def close(self):
        pass
