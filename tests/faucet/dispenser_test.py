from datetime import datetime, timedelta

import pytest
from anyio import create_task_group
from eth_account import Account
from web3 import Web3

from faucet_server.chain import MockChainClient
from faucet_server.config import Config
from faucet_server.faucet import Dispenser, MemoryCooldownCache, StatusChecker
from faucet_server.models import Confirmed, Pending, Rejected, Submitted


async def test_dispense(dispenser: Dispenser, chain: MockChainClient, recipient: str):
    result = await dispenser.dispense(recipient)

    assert isinstance(result, Submitted)
    assert result.tx_hash.startswith("0x")
    assert len(result.tx_hash) == 66
    assert result.amount == Web3.to_wei("0.05", "ether")
    assert result.message == f"Transaction submitted. Sending 0.05 ETH to {recipient}"

    assert len(chain.sent_transactions) == 1
    raw_tx = chain.sent_transactions[0]
    assert Account.recover_transaction(raw_tx) == dispenser.address
    assert chain.balances[dispenser.address] == Web3.to_wei("0.95", "ether")


async def test_dispense_then_status(
    dispenser: Dispenser,
    status_checker: StatusChecker,
    chain: MockChainClient,
    recipient: str,
):
    result = await dispenser.dispense(recipient)
    assert isinstance(result, Submitted)

    status = await status_checker.check(result.tx_hash)
    assert isinstance(status, Pending)
    assert status.tx_hash == result.tx_hash

    chain.mine(result.tx_hash, block_number=42)

    status = await status_checker.check(result.tx_hash)
    assert isinstance(status, Confirmed)
    assert status.block_number == 42


@pytest.mark.parametrize(
    "address",
    [
        "not-an-address",
        "0x0000000000000000000000000000000000dEaD",
        "000000000000000000000000000000000000dEaD",
        "0x000000000000000000000000000000000000dEaG",
        "0x000000000000000000000000000000000000dead00",
    ],
)
async def test_invalid_address(dispenser: Dispenser, chain: MockChainClient, address: str):
    result = await dispenser.dispense(address)

    assert isinstance(result, Rejected)
    assert result.error == "invalid_address"
    assert result.status_code == 400
    assert result.reason == "Invalid Ethereum address format"
    assert sum(chain.calls.values()) == 0


async def test_missing_address(dispenser: Dispenser, chain: MockChainClient):
    for address in [None, ""]:
        result = await dispenser.dispense(address)

        assert isinstance(result, Rejected)
        assert result.status_code == 400
        assert result.reason == "Ethereum address is required"
    assert sum(chain.calls.values()) == 0


async def test_bad_checksum_address(dispenser: Dispenser, chain: MockChainClient):
    result = await dispenser.dispense("0x000000000000000000000000000000000000DeaD")

    assert isinstance(result, Rejected)
    assert result.error == "invalid_address"
    assert sum(chain.calls.values()) == 0


async def test_lowercase_address(dispenser: Dispenser, recipient: str):
    result = await dispenser.dispense(recipient.lower())

    assert isinstance(result, Submitted)


async def test_insufficient_funds(
    dispenser: Dispenser, chain: MockChainClient, faucet_address: str, recipient: str
):
    chain.set_balance(faucet_address, Web3.to_wei("0.01", "ether"))

    result = await dispenser.dispense(recipient)

    assert isinstance(result, Rejected)
    assert result.error == "insufficient"
    assert result.status_code == 500
    assert "Insufficient funds" in result.reason
    assert "0.01" in result.reason
    assert chain.calls["sendRawTransaction"] == 0
    assert len(chain.sent_transactions) == 0


async def test_balance_equal_to_amount(
    dispenser: Dispenser, chain: MockChainClient, faucet_address: str, recipient: str
):
    chain.set_balance(faucet_address, Web3.to_wei("0.05", "ether"))

    result = await dispenser.dispense(recipient)

    assert isinstance(result, Submitted)


async def test_network_unreachable(
    dispenser: Dispenser, chain: MockChainClient, recipient: str
):
    chain.errors["getBlockNumber"] = "connection refused"

    result = await dispenser.dispense(recipient)

    assert isinstance(result, Rejected)
    assert result.error == "network"
    assert result.status_code == 500
    assert result.reason == "Could not connect to Ethereum network. Please check your RPC URL."
    assert chain.calls["getBalance"] == 0


async def test_balance_query_failed(
    dispenser: Dispenser, chain: MockChainClient, recipient: str
):
    chain.errors["getBalance"] = "header not found"

    result = await dispenser.dispense(recipient)

    assert isinstance(result, Rejected)
    assert result.error == "network"
    assert result.reason == "Could not get faucet balance: header not found"


async def test_chain_not_configured(config, signer, recipient: str):
    dispenser = Dispenser(config, None, signer)

    result = await dispenser.dispense(recipient)

    assert isinstance(result, Rejected)
    assert result.error == "configuration"
    assert result.status_code == 500
    assert result.reason == "Ethereum provider not properly configured"


async def test_signer_not_configured(config, chain: MockChainClient, recipient: str):
    dispenser = Dispenser(config, chain, None)

    result = await dispenser.dispense(recipient)

    assert isinstance(result, Rejected)
    assert result.error == "configuration"
    assert result.reason == "Ethereum provider not properly configured"
    assert chain.calls["getBalance"] == 0
    assert dispenser.address is None


async def test_broadcast_failed(
    dispenser: Dispenser, chain: MockChainClient, recipient: str
):
    chain.errors["sendRawTransaction"] = "replacement transaction underpriced"

    result = await dispenser.dispense(recipient)

    assert isinstance(result, Rejected)
    assert result.error == "broadcast"
    assert result.status_code == 500
    assert result.reason == "Transaction failed: replacement transaction underpriced"
    assert len(chain.sent_transactions) == 0


@pytest.mark.parametrize("faucet_options", [{"dispense_timeout": 0.1}])
async def test_timeout(dispenser: Dispenser, chain: MockChainClient, recipient: str):
    chain.delays["getBalance"] = 5

    result = await dispenser.dispense(recipient)

    assert isinstance(result, Rejected)
    assert result.error == "timeout"
    assert result.status_code == 504
    assert len(chain.sent_transactions) == 0


async def test_nonce_increases(
    dispenser: Dispenser, chain: MockChainClient, faucet_address: str, recipient: str
):
    r1 = await dispenser.dispense(recipient)
    r2 = await dispenser.dispense("0x577887519278199ce8F8D80bAcc70fc32b48daD4")

    assert isinstance(r1, Submitted)
    assert isinstance(r2, Submitted)
    assert r1.tx_hash != r2.tx_hash
    assert chain.nonces[Web3.to_checksum_address(faucet_address)] == 2


async def test_concurrent_dispense(
    dispenser: Dispenser, chain: MockChainClient, faucet_address: str
):
    chain.set_balance(faucet_address, Web3.to_wei("0.08", "ether"))
    chain.delays["getBalance"] = 0.01

    addresses = [
        "0x577887519278199ce8F8D80bAcc70fc32b48daD4",
        "0x9229d36c82E4e1d03B086C27d704741D0c78321e",
        "0xEa1A669fd6A705d28239011A074adB3Cfd6cd82B",
    ]
    results = []

    async def _dispense(address: str):
        results.append(await dispenser.dispense(address))

    async with create_task_group() as tg:
        for address in addresses:
            tg.start_soon(_dispense, address)

    submitted = [r for r in results if isinstance(r, Submitted)]
    rejected = [r for r in results if isinstance(r, Rejected)]
    assert len(submitted) == 1
    assert len(rejected) == 2
    assert all(r.error == "insufficient" for r in rejected)
    assert len(chain.sent_transactions) == 1


async def test_configured_gas(privkeys, chain: MockChainClient, signer, recipient):
    config = Config.model_validate(
        {
            "ethereum": {
                "provider": "http://127.0.0.1:8545",
                "privkey": privkeys[0],
                "chain_id": 5,
                "gas": 30000,
                "gas_price": 2000000000,
            },
        }
    )
    dispenser = Dispenser(config, chain, signer)

    result = await dispenser.dispense(recipient)

    assert isinstance(result, Submitted)
    assert chain.calls["getChainId"] == 0
    assert chain.calls["getGasPrice"] == 0
    assert chain.calls["estimateGas"] == 0


async def test_cooldown(config, chain: MockChainClient, signer, recipient: str):
    now = datetime(2024, 1, 1, 12, 0, 0)
    cooldown = MemoryCooldownCache(timedelta(minutes=10), now=lambda: now)
    dispenser = Dispenser(config, chain, signer, cooldown=cooldown)

    result = await dispenser.dispense(recipient)
    assert isinstance(result, Submitted)

    result = await dispenser.dispense(recipient.lower())
    assert isinstance(result, Rejected)
    assert result.error == "cooldown"
    assert result.status_code == 429
    assert result.retry_after == 600
    assert "10 minute(s)" in result.reason
    assert len(chain.sent_transactions) == 1

    result = await dispenser.dispense("0x577887519278199ce8F8D80bAcc70fc32b48daD4")
    assert isinstance(result, Submitted)


async def test_cooldown_not_recorded_on_failure(
    config, chain: MockChainClient, signer, recipient: str
):
    cooldown = MemoryCooldownCache(timedelta(minutes=10))
    dispenser = Dispenser(config, chain, signer, cooldown=cooldown)

    chain.errors["sendRawTransaction"] = "nonce too low"
    result = await dispenser.dispense(recipient)
    assert isinstance(result, Rejected)
    assert len(cooldown) == 0

    chain.errors.clear()
    result = await dispenser.dispense(recipient)
    assert isinstance(result, Submitted)
    assert len(cooldown) == 1


@pytest.mark.parametrize("faucet_options", [{"cooldown_minutes": 30}])
async def test_cooldown_from_config(dispenser: Dispenser, recipient: str):
    result = await dispenser.dispense(recipient)
    assert isinstance(result, Submitted)

    result = await dispenser.dispense(recipient)
    assert isinstance(result, Rejected)
    assert result.error == "cooldown"
