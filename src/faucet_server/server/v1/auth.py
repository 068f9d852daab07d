from fastapi import APIRouter, Body, HTTPException
from typing_extensions import Annotated

from faucet_server.models import AuthInput, AuthResponse, ErrorResponse

from ..depends import ConfigDep, password_matches

router = APIRouter()


@router.post(
    "/auth", response_model=AuthResponse, responses={401: {"model": ErrorResponse}}
)
async def authenticate(input: Annotated[AuthInput, Body()], *, config: ConfigDep):
    password = config.faucet.password
    if password is None or len(password.get_secret_value()) == 0:
        return AuthResponse(message="Faucet is not password protected")
    if not password_matches(config, input.password):
        raise HTTPException(401, "Incorrect password. Please try again.")
    return AuthResponse()
