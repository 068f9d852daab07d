import logging

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from typing_extensions import Annotated
from web3 import Web3

from faucet_server.chain import ChainError
from faucet_server.faucet import (ConfigurationError, InvalidAddressError,
                                  NetworkUnreachableError)
from faucet_server.models import (BalanceResponse, DispenseInput,
                                  DispenseResponse, ErrorResponse, FaucetInfo,
                                  Rejected, is_valid_address)
from faucet_server.utils import format_ether

from ..depends import ChainDep, ConfigDep, DispenserDep, check_password

_logger = logging.getLogger(__name__)

router = APIRouter()


_error_responses = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    429: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    504: {"model": ErrorResponse},
}


@router.post(
    "/faucet",
    response_model=DispenseResponse,
    responses=_error_responses,  # type: ignore
    dependencies=[Depends(check_password)],
)
async def dispense(input: Annotated[DispenseInput, Body()], *, dispenser: DispenserDep):
    result = await dispenser.dispense(input.address)
    if isinstance(result, Rejected):
        headers = None
        if result.retry_after is not None:
            headers = {"Retry-After": str(result.retry_after)}
        return JSONResponse(
            status_code=result.status_code,
            content=ErrorResponse(error=result.reason).model_dump(),
            headers=headers,
        )
    return DispenseResponse(hash=result.tx_hash, message=result.message)


@router.get("/faucet", response_model=FaucetInfo)
async def get_faucet_info(
    *, config: ConfigDep, dispenser: DispenserDep, chain: ChainDep
):
    address = dispenser.address
    balance = None
    if chain is not None and address is not None:
        try:
            balance = format_ether(await chain.get_balance(address))
        except ChainError as e:
            _logger.error(f"Error getting faucet balance: {e}")

    password = config.faucet.password
    return FaucetInfo(
        address=address or "",
        balance=balance,
        amount=dispenser.amount,
        cooldown_minutes=config.faucet.cooldown_minutes,
        password_required=password is not None
        and len(password.get_secret_value()) > 0,
    )


@router.get(
    "/balance/{address}",
    response_model=BalanceResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_address_balance(address: str, *, chain: ChainDep):
    if not is_valid_address(address):
        raise InvalidAddressError("Invalid Ethereum address")
    if chain is None:
        raise ConfigurationError("RPC URL not configured")

    checksum_address = Web3.to_checksum_address(address)
    try:
        balance = await chain.get_balance(checksum_address)
    except ChainError as e:
        raise NetworkUnreachableError(f"Could not get balance: {e.message}") from e
    return BalanceResponse(address=checksum_address, balance=format_ether(balance))
