import httpx
import pytest
from web3 import Web3

from faucet_server.chain import MockChainClient
from faucet_server.client.cli import request_and_wait
from faucet_server.faucet import Dispenser, StatusChecker
from faucet_server.server import Server


class MiningChainClient(MockChainClient):
    async def send_raw_transaction(self, raw_tx: bytes) -> str:
        tx_hash = await super().send_raw_transaction(raw_tx)
        self.mine(tx_hash)
        return tx_hash


@pytest.fixture
def transport(server: Server):
    return httpx.ASGITransport(app=server.app)


async def test_pending_exit_code(transport, chain: MockChainClient, recipient: str):
    code = await request_and_wait(
        "http://faucet.test",
        recipient,
        max_attempts=2,
        interval=0,
        transport=transport,
    )
    assert code == 2
    assert len(chain.sent_transactions) == 1
    assert chain.calls["getTransactionReceipt"] == 2


async def test_rejected_exit_code(transport, chain: MockChainClient):
    code = await request_and_wait(
        "http://faucet.test", "not-an-address", interval=0, transport=transport
    )
    assert code == 1
    assert len(chain.sent_transactions) == 0


async def test_confirmed_exit_code(config, signer, faucet_address: str, recipient: str):
    chain = MiningChainClient()
    chain.set_balance(faucet_address, Web3.to_wei(1, "ether"))
    server = Server(config, Dispenser(config, chain, signer), StatusChecker(chain), chain)

    code = await request_and_wait(
        "http://faucet.test",
        recipient,
        max_attempts=3,
        interval=0,
        transport=httpx.ASGITransport(app=server.app),
    )
    assert code == 0
    assert chain.calls["getTransactionReceipt"] == 1
