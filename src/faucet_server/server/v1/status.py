from fastapi import APIRouter, Body
from typing_extensions import Annotated

from faucet_server.models import (Confirmed, ErrorResponse, Pending,
                                  TransactionStatusInput,
                                  TransactionStatusResponse)

from ..depends import StatusCheckerDep

router = APIRouter()


@router.post(
    "/transaction-status",
    response_model=TransactionStatusResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_transaction_status(
    input: Annotated[TransactionStatusInput, Body()], *, checker: StatusCheckerDep
):
    status = await checker.check(input.hash)
    if isinstance(status, Confirmed):
        return TransactionStatusResponse(
            status="success",
            hash=status.tx_hash,
            block_number=status.block_number,
            message="Transaction successfully mined",
        )
    elif isinstance(status, Pending):
        return TransactionStatusResponse(
            status="pending",
            hash=status.tx_hash,
            message="Transaction is still pending",
        )
    else:
        return TransactionStatusResponse(
            status="pending",
            hash=status.tx_hash,
            message="Transaction status unknown, it may still be pending",
        )
