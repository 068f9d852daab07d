import pytest
from fastapi.testclient import TestClient

from faucet_server.server import Server


@pytest.fixture
def client(server: Server):
    return TestClient(server.app)
