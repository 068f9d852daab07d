import logging
from datetime import timedelta
from typing import Optional

from anyio import Lock, fail_after, get_cancelled_exc_class
from eth_typing import ChecksumAddress
from web3 import Web3
from web3.types import TxParams

from faucet_server.chain import ChainClient, ChainError
from faucet_server.config import Config, TxOption, get_default_tx_option
from faucet_server.models import (DispenseResult, Rejected, Submitted,
                                  is_valid_address)
from faucet_server.signer import Signer
from faucet_server.utils import format_ether

from .cooldown import CooldownCache, MemoryCooldownCache
from .errors import (BroadcastError, ConfigurationError, CooldownError,
                     FaucetError, InsufficientFundsError, InvalidAddressError,
                     NetworkUnreachableError, RequestTimeoutError)

_logger = logging.getLogger(__name__)


class Dispenser(object):
    """
    Sends a fixed amount of test ETH from the dispenser account.

    A dispense validates the recipient address, checks that the rpc endpoint
    answers, that a signing credential is configured and that the dispenser
    balance covers the amount, then broadcasts one signed transfer and returns
    its hash without waiting for the receipt.

    Balance check and broadcast run under one lock, so concurrent requests
    never both spend the same balance and nonces are allocated one at a time.
    """

    def __init__(
        self,
        config: Config,
        chain: Optional[ChainClient],
        signer: Optional[Signer],
        cooldown: Optional[CooldownCache] = None,
        tx_option: Optional[TxOption] = None,
    ) -> None:
        self._chain = chain
        self._signer = signer

        self._amount = config.faucet.amount
        self._amount_wei = config.faucet.amount_wei
        self._timeout = config.faucet.dispense_timeout

        if tx_option is None:
            tx_option = get_default_tx_option(config)
        self._tx_option = tx_option

        if cooldown is None and config.faucet.cooldown_minutes:
            cooldown = MemoryCooldownCache(
                timedelta(minutes=config.faucet.cooldown_minutes)
            )
        self._cooldown = cooldown

        self._lock = Lock()

    @property
    def amount(self) -> str:
        return format(self._amount, "f")

    @property
    def address(self) -> Optional[ChecksumAddress]:
        if self._signer is None:
            return None
        return self._signer.address

    async def dispense(self, address: Optional[str]) -> DispenseResult:
        try:
            return await self._dispense(address)
        except FaucetError as e:
            if e.status_code >= 500:
                _logger.error(f"dispense to {address} failed: {e.message}")
            else:
                _logger.info(f"dispense to {address} rejected: {e.message}")
            retry_after = None
            if isinstance(e, CooldownError):
                retry_after = e.retry_after
            return Rejected(
                error=e.kind,
                reason=e.message,
                status_code=e.status_code,
                retry_after=retry_after,
            )

    async def _dispense(self, address: Optional[str]) -> Submitted:
        if not address:
            raise InvalidAddressError("Ethereum address is required")
        if not is_valid_address(address):
            raise InvalidAddressError("Invalid Ethereum address format")
        recipient = Web3.to_checksum_address(address)

        if self._cooldown is not None:
            await self._cooldown.check(recipient)

        try:
            with fail_after(self._timeout):
                chain = await self._check_connectivity()
                signer = self._check_configuration()

                async with self._lock:
                    if self._cooldown is not None:
                        await self._cooldown.check(recipient)
                    await self._check_balance(chain, signer)
                    tx_hash = await self._broadcast(chain, signer, recipient)
                    if self._cooldown is not None:
                        await self._cooldown.record(recipient)
        except TimeoutError as e:
            raise RequestTimeoutError(
                "Request timed out. The network might be congested or the RPC endpoint is unresponsive."
            ) from e

        _logger.info(f"Sent {self.amount} ETH to {recipient}, tx hash {tx_hash}")
        return Submitted(
            tx_hash=tx_hash,
            amount=self._amount_wei,
            message=f"Transaction submitted. Sending {self.amount} ETH to {address}",
        )

    async def _check_connectivity(self) -> ChainClient:
        if self._chain is None:
            _logger.error("Faucet rpc endpoint is not configured")
            raise ConfigurationError("Ethereum provider not properly configured")

        try:
            block_number = await self._chain.get_block_number()
        except ChainError as e:
            _logger.error(f"Provider connection test failed: {e}")
            raise NetworkUnreachableError(
                "Could not connect to Ethereum network. Please check your RPC URL."
            ) from e
        _logger.debug(f"Provider connection ok, block number {block_number}")
        return self._chain

    def _check_configuration(self) -> Signer:
        if self._signer is None:
            _logger.error("Faucet private key is not configured")
            raise ConfigurationError("Ethereum provider not properly configured")
        return self._signer

    async def _check_balance(self, chain: ChainClient, signer: Signer):
        try:
            balance = await chain.get_balance(signer.address)
        except ChainError as e:
            _logger.error(f"Get faucet balance failed: {e}")
            raise NetworkUnreachableError(
                f"Could not get faucet balance: {e.message}"
            ) from e

        if balance < self._amount_wei:
            raise InsufficientFundsError(
                f"Insufficient funds in faucet wallet. Current balance: {format_ether(balance)} ETH"
            )

    async def _broadcast(
        self, chain: ChainClient, signer: Signer, recipient: ChecksumAddress
    ) -> str:
        try:
            tx: TxParams = {}
            tx.update(**self._tx_option)
            tx["to"] = recipient
            tx["value"] = self._amount_wei
            tx["nonce"] = await chain.get_transaction_count(signer.address)
            if "chainId" not in tx:
                tx["chainId"] = await chain.get_chain_id()
            if "maxFeePerGas" in tx:
                if "maxPriorityFeePerGas" not in tx:
                    tx["maxPriorityFeePerGas"] = min(
                        tx["maxFeePerGas"], Web3.to_wei(1, "gwei")
                    )
            elif "gasPrice" not in tx:
                tx["gasPrice"] = await chain.get_gas_price()
            if "gas" not in tx:
                tx["gas"] = await chain.estimate_gas(
                    {"from": signer.address, "to": recipient, "value": self._amount_wei}
                )

            raw_tx = await signer.sign_transaction(tx)
            tx_hash = await chain.send_raw_transaction(raw_tx)
        except get_cancelled_exc_class():
            raise
        except ChainError as e:
            raise BroadcastError(f"Transaction failed: {e.message}") from e
        except Exception as e:
            _logger.exception(e)
            raise BroadcastError(f"Transaction failed: {e}") from e

        if not tx_hash:
            raise BroadcastError("Transaction failed: no transaction hash returned")
        return tx_hash
