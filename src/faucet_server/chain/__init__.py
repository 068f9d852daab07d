from typing import Optional

from faucet_server.config import Config

from .abc import ChainClient
from .exceptions import ChainError
from .mock_impl import MockChainClient
from .w3_pool import W3Pool
from .web_impl import Web3ChainClient

__all__ = [
    "ChainClient",
    "ChainError",
    "MockChainClient",
    "W3Pool",
    "Web3ChainClient",
    "create_chain_client",
]


def create_chain_client(config: Config) -> Optional[ChainClient]:
    """Web3 client for the configured rpc endpoint, None when it is not set."""
    if not config.provider_configured:
        return None
    return Web3ChainClient(
        provider_path=config.ethereum.provider,
        pool_size=config.ethereum.pool_size,
        timeout=config.ethereum.timeout,
    )
