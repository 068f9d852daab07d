from typing import Optional

import httpx

from faucet_server.models import DispenseResponse, TransactionStatusResponse

from .abc import FaucetClient
from .exceptions import FaucetClientError, FaucetTimeoutError


def _process_resp(resp: httpx.Response, method: str):
    try:
        resp.raise_for_status()
        return resp
    except httpx.HTTPStatusError as e:
        message = str(e)
        try:
            content = resp.json()
            if "error" in content:
                message = content["error"]
            else:
                message = resp.text
        except Exception:
            pass
        raise FaucetClientError(resp.status_code, method, message) from e


class WebFaucetClient(FaucetClient):
    def __init__(
        self,
        base_url: str,
        password: Optional[str] = None,
        # longer than the default server dispense timeout
        timeout: float = 35,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        headers = {}
        if password:
            headers["X-Faucet-Password"] = password
        self.timeout = timeout
        self.client = httpx.AsyncClient(
            base_url=base_url, timeout=timeout, headers=headers, transport=transport
        )

    async def request_tokens(self, address: str) -> DispenseResponse:
        input = {"address": address}

        try:
            resp = await self.client.post("/api/v1/faucet", json=input)
        except httpx.TimeoutException as e:
            raise FaucetTimeoutError("requestTokens", self.timeout) from e
        resp = _process_resp(resp, "requestTokens")
        return DispenseResponse.model_validate(resp.json())

    async def get_transaction_status(self, tx_hash: str) -> TransactionStatusResponse:
        input = {"hash": tx_hash}

        try:
            resp = await self.client.post("/api/v1/transaction-status", json=input)
        except httpx.TimeoutException as e:
            raise FaucetTimeoutError("getTransactionStatus", self.timeout) from e
        resp = _process_resp(resp, "getTransactionStatus")
        return TransactionStatusResponse.model_validate(resp.json())

    async def close(self):
        await self.client.aclose()
