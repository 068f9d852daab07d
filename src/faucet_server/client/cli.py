import argparse
import logging
import sys
from typing import List, Optional

import anyio
import httpx

from faucet_server import log
from faucet_server.config import LogConfig
from faucet_server.models import Confirmed

from .exceptions import FaucetClientError, FaucetTimeoutError
from .poller import poll_transaction_status
from .web_impl import WebFaucetClient

_logger = logging.getLogger(__name__)


async def request_and_wait(
    base_url: str,
    address: str,
    password: Optional[str] = None,
    max_attempts: int = 20,
    interval: float = 5,
    timeout: float = 35,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> int:
    client = WebFaucetClient(
        base_url, password=password, timeout=timeout, transport=transport
    )
    try:
        try:
            resp = await client.request_tokens(address)
        except (FaucetClientError, FaucetTimeoutError) as e:
            _logger.error(str(e))
            return 1
        _logger.info(resp.message)
        _logger.info(f"Transaction hash: {resp.hash}")

        outcome = await poll_transaction_status(
            client, resp.hash, max_attempts=max_attempts, interval=interval
        )
        if isinstance(outcome, Confirmed):
            _logger.info(
                f"Transaction confirmed in block {outcome.block_number}"
            )
            return 0
        _logger.warning(
            f"Transaction {outcome.tx_hash} is not confirmed after {outcome.attempts} checks, "
            "it may still be mined later"
        )
        return 2
    finally:
        await client.close()


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        description="Request test ETH from a faucet server and wait for the transfer"
    )
    parser.add_argument("address", type=str, help="recipient address")
    parser.add_argument(
        "--url", type=str, default="http://127.0.0.1:3000", help="faucet server url"
    )
    parser.add_argument("--password", type=str, default=None)
    parser.add_argument("--max-attempts", type=int, default=20)
    parser.add_argument("--interval", type=float, default=5)
    parser.add_argument("--timeout", type=float, default=35)
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args(argv)

    log.init(LogConfig(level="DEBUG" if args.debug else "INFO"), file_log=False)

    try:
        code = anyio.run(
            request_and_wait,
            args.url,
            args.address,
            args.password,
            args.max_attempts,
            args.interval,
            args.timeout,
        )
    except KeyboardInterrupt:
        code = 130
    sys.exit(code)


if __name__ == "__main__":
    main()
