from typing import Optional

from faucet_server.config import Config

from .abc import Signer
from .local_impl import LocalSigner

__all__ = ["Signer", "LocalSigner", "create_signer"]


def create_signer(config: Config) -> Optional[Signer]:
    """Signer for the configured private key, None when it is not set."""
    if not config.privkey_configured:
        return None
    return LocalSigner(config.ethereum.privkey.get_secret_value())
