import pytest
from eth_account import Account
from web3 import Web3

from faucet_server.chain import MockChainClient
from faucet_server.config import Config
from faucet_server.faucet import Dispenser, StatusChecker
from faucet_server.server import Server
from faucet_server.signer import LocalSigner

pytestmark = pytest.mark.anyio


@pytest.fixture(scope="session", autouse=True)
def anyio_backend():
    return "asyncio"


@pytest.fixture
def privkeys():
    return [
        "0xa627246a109551432ac5db6535566af34fdddfaa11df17b8afd53eb987e209a2",
        "0xb171f296622b98cbdc08dcdcb0696f738c3a22d9d367c657117cd3c8d0b71d42",
        "0x8fb2fc9862b93b5b75cda8202f583711201e4cba5459eefe442b8c5dcc4bdab9",
    ]


@pytest.fixture
def faucet_address(privkeys):
    return Account.from_key(privkeys[0]).address


@pytest.fixture
def recipient():
    return "0x000000000000000000000000000000000000dEaD"


@pytest.fixture
def faucet_options():
    return {}


@pytest.fixture
def config(privkeys, faucet_options):
    return Config.model_validate(
        {
            "ethereum": {
                "provider": "http://127.0.0.1:8545",
                "privkey": privkeys[0],
            },
            "faucet": {"amount": "0.05", **faucet_options},
        }
    )


@pytest.fixture
def chain(faucet_address):
    chain = MockChainClient()
    chain.set_balance(faucet_address, Web3.to_wei(1, "ether"))
    return chain


@pytest.fixture
def signer(privkeys):
    return LocalSigner(privkeys[0])


@pytest.fixture
def dispenser(config, chain, signer):
    return Dispenser(config, chain, signer)


@pytest.fixture
def status_checker(chain):
    return StatusChecker(chain)


@pytest.fixture
def server(config, dispenser, status_checker, chain):
    return Server(config, dispenser, status_checker, chain)
