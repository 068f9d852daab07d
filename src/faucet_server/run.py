import logging
import signal
from typing import Optional

import anyio
from anyio import (TASK_STATUS_IGNORED, Event, create_task_group,
                   move_on_after, sleep)
from anyio.abc import TaskGroup, TaskStatus

from faucet_server import log
from faucet_server.chain import ChainClient, create_chain_client
from faucet_server.config import Config, load_config
from faucet_server.faucet import Dispenser, StatusChecker
from faucet_server.server import Server
from faucet_server.signer import create_signer

_logger = logging.getLogger(__name__)


class FaucetRunner(object):
    def __init__(self, config: Optional[Config] = None) -> None:
        if config is None:
            config = load_config()
        self.config = config

        log.init(self.config.log)
        _logger.debug("Logger init completed.")

        self._chain: Optional[ChainClient] = None
        self._server: Optional[Server] = None
        self._tg: Optional[TaskGroup] = None

        self._shutdown_event: Optional[Event] = None
        self._should_shutdown = False
        signal.signal(signal.SIGINT, self._shutdown_signal_handler)
        signal.signal(signal.SIGTERM, self._shutdown_signal_handler)

    def _shutdown_signal_handler(self, *args):
        self._should_shutdown = True

    async def _check_should_shutdown(self):
        while not self._should_shutdown:
            await sleep(0.1)
        self._set_shutdown_event()

    def _set_shutdown_event(self):
        if self._shutdown_event is not None:
            self._shutdown_event.set()

    async def _wait_for_shutdown(self):
        if self._shutdown_event is not None:
            await self._shutdown_event.wait()
            await self._stop()

    async def run(self, task_status: TaskStatus[None] = TASK_STATUS_IGNORED):
        assert self._tg is None, "Faucet server is running"

        _logger.info("Starting faucet server")

        self._shutdown_event = Event()

        if not self.config.provider_configured:
            _logger.warning("Ethereum provider is not configured, dispense requests will fail")
        if not self.config.privkey_configured:
            _logger.warning("Faucet private key is not configured, dispense requests will fail")

        self._chain = create_chain_client(self.config)
        signer = create_signer(self.config)
        if signer is not None:
            _logger.info(f"Faucet account: {signer.address}")

        dispenser = Dispenser(self.config, self._chain, signer)
        status_checker = StatusChecker(self._chain)
        _logger.info(f"Dispense amount: {dispenser.amount} ETH")

        self._server = Server(self.config, dispenser, status_checker, self._chain)
        _logger.info("Web server init completed.")

        try:
            async with create_task_group() as tg:
                self._tg = tg

                tg.start_soon(self._check_should_shutdown)
                tg.start_soon(self._wait_for_shutdown)

                await tg.start(
                    self._server.start,
                    self.config.server_host,
                    self.config.server_port,
                    self.config.log.level == "DEBUG",
                )
                _logger.info(
                    f"Faucet server started on {self.config.server_host}:{self.config.server_port}"
                )
                task_status.started()
        finally:
            if self._chain is not None:
                with move_on_after(2, shield=True):
                    await self._chain.close()
            self._chain = None
            self._shutdown_event = None
            self._tg = None
            _logger.info("Faucet server stopped")

    async def _stop(self):
        _logger.info("Stopping faucet server")
        if self._tg is None:
            return

        if self._server is not None:
            self._server.stop()
        self._tg.cancel_scope.cancel()

    async def stop(self):
        self._set_shutdown_event()


def run():
    try:
        runner = FaucetRunner()
        anyio.run(runner.run)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
