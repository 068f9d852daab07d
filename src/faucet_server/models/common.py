import re
from typing import Any

from web3 import Web3

_address_pattern = re.compile(r"^0x[0-9a-fA-F]{40}$")


def is_valid_address(value: Any) -> bool:
    """
    Whether value is a 0x-prefixed, 20 bytes hex account address.

    Mixed-case input must carry a valid EIP-55 checksum, all lower or all
    upper case input is accepted as is.
    """
    if not isinstance(value, str):
        return False
    if _address_pattern.match(value) is None:
        return False
    body = value[2:]
    if body.lower() == body or body.upper() == body:
        return True
    return Web3.is_checksum_address(value)
