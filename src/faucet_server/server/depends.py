import secrets
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request
from typing_extensions import Annotated

from faucet_server.chain import ChainClient
from faucet_server.config import Config
from faucet_server.faucet import Dispenser, StatusChecker

__all__ = [
    "ConfigDep",
    "DispenserDep",
    "StatusCheckerDep",
    "ChainDep",
    "check_password",
    "password_matches",
]


async def _get_config(request: Request) -> Config:
    return request.app.state.config


async def _get_dispenser(request: Request) -> Dispenser:
    return request.app.state.dispenser


async def _get_status_checker(request: Request) -> StatusChecker:
    return request.app.state.status_checker


async def _get_chain(request: Request) -> Optional[ChainClient]:
    return request.app.state.chain


ConfigDep = Annotated[Config, Depends(_get_config)]
DispenserDep = Annotated[Dispenser, Depends(_get_dispenser)]
StatusCheckerDep = Annotated[StatusChecker, Depends(_get_status_checker)]
ChainDep = Annotated[Optional[ChainClient], Depends(_get_chain)]


def password_matches(config: Config, password: Optional[str]) -> bool:
    expected = config.faucet.password
    if expected is None or len(expected.get_secret_value()) == 0:
        return True
    if password is None:
        return False
    return secrets.compare_digest(
        password.encode("utf-8"), expected.get_secret_value().encode("utf-8")
    )


async def check_password(
    config: ConfigDep,
    x_faucet_password: Annotated[Optional[str], Header()] = None,
):
    if not password_matches(config, x_faucet_password):
        raise HTTPException(401, "Incorrect password. Please try again.")
