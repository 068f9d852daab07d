import pytest

from faucet_server.chain import MockChainClient
from faucet_server.faucet import (ConfigurationError, InvalidHashError,
                                  StatusChecker)
from faucet_server.models import Confirmed, Pending, TxReceiptInfo, Unknown

tx_hash = "0x" + "ab" * 32


async def test_pending(status_checker: StatusChecker, chain: MockChainClient):
    status = await status_checker.check(tx_hash)
    assert status == Pending(tx_hash=tx_hash)
    assert chain.calls["getTransactionReceipt"] == 1


async def test_confirmed(status_checker: StatusChecker, chain: MockChainClient):
    chain.mine(tx_hash, block_number=100)

    status = await status_checker.check(tx_hash)
    assert status == Confirmed(tx_hash=tx_hash, block_number=100)


async def test_reverted_is_confirmed(
    status_checker: StatusChecker, chain: MockChainClient
):
    chain.receipts[tx_hash] = TxReceiptInfo(tx_hash=tx_hash, block_number=7, status=0)

    status = await status_checker.check(tx_hash)
    assert isinstance(status, Confirmed)
    assert status.block_number == 7


async def test_repeated_queries(status_checker: StatusChecker, chain: MockChainClient):
    first = await status_checker.check(tx_hash)
    second = await status_checker.check(tx_hash)
    assert first == second

    chain.mine(tx_hash)
    confirmed = await status_checker.check(tx_hash)
    assert isinstance(confirmed, Confirmed)

    # once mined it never goes back to pending
    for _ in range(3):
        assert (await status_checker.check(tx_hash)) == confirmed
    assert chain.calls["getTransactionReceipt"] == 6


async def test_lookup_error(status_checker: StatusChecker, chain: MockChainClient):
    chain.errors["getTransactionReceipt"] = "upstream unavailable"

    status = await status_checker.check(tx_hash)
    assert status == Unknown(tx_hash=tx_hash, reason="upstream unavailable")


async def test_missing_hash(status_checker: StatusChecker, chain: MockChainClient):
    for value in [None, ""]:
        with pytest.raises(InvalidHashError) as e:
            await status_checker.check(value)
        assert e.value.status_code == 400
        assert e.value.message == "Transaction hash is required"
    assert chain.calls["getTransactionReceipt"] == 0


async def test_chain_not_configured():
    checker = StatusChecker(None)

    with pytest.raises(ConfigurationError) as e:
        await checker.check(tx_hash)
    assert e.value.status_code == 500
    assert e.value.message == "RPC URL not configured"
