from decimal import Decimal

from web3 import Web3

__all__ = ["format_ether"]


def format_ether(wei: int) -> str:
    """Wei amount as a plain decimal ETH string, e.g. 10**16 -> "0.01"."""
    value = Web3.from_wei(wei, "ether")
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)
