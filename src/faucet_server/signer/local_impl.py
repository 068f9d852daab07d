from typing import Any, Dict

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_typing import ChecksumAddress
from web3.types import TxParams

from .abc import Signer


class LocalSigner(Signer):
    def __init__(self, privkey: str) -> None:
        if not privkey.startswith("0x"):
            privkey = "0x" + privkey
        self._account: LocalAccount = Account.from_key(privkey)

    @property
    def address(self) -> ChecksumAddress:
        return self._account.address

    async def sign_transaction(self, tx: TxParams) -> bytes:
        tx_dict: Dict[str, Any] = dict(tx)
        tx_dict.pop("from", None)
        signed = self._account.sign_transaction(tx_dict)
        return bytes(signed.raw_transaction)
