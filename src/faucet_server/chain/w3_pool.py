import logging
import ssl
import warnings
from collections import deque
from typing import Awaitable, Callable, Deque, Dict, Optional

import certifi
from aiohttp import ClientSession, ClientTimeout, TCPConnector
from anyio import Condition, move_on_after
from web3 import AsyncHTTPProvider, AsyncWeb3, WebSocketProvider
from web3.providers.async_base import AsyncBaseProvider
from websockets import ConnectionClosed

_logger = logging.getLogger(__name__)


_GuardCallback = Callable[[int], Awaitable[None]]
_Disconnect = Callable[[], Awaitable[None]]


async def _noop():
    pass


class W3Guard(object):
    """
    One pooled connection, lent out for the duration of an ``async with``.

    On exit the connection goes back to the pool, unless the websocket was
    dropped, in which case it is disconnected and removed from the pool.
    """

    def __init__(
        self,
        id: int,
        w3: AsyncWeb3,
        disconnect: _Disconnect,
        on_idle: _GuardCallback,
        on_close: _GuardCallback,
    ):
        self.id = id
        self._w3 = w3
        self._disconnect = disconnect
        self._on_idle = on_idle
        self._on_close = on_close
        self._closed = False

    async def __aenter__(self) -> AsyncWeb3:
        return self._w3

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        with move_on_after(5, shield=True):
            if isinstance(exc_val, ConnectionClosed):
                _logger.error(f"w3 connection {self.id} is dropped: {exc_val}")
                await self.close()
            else:
                await self._on_idle(self.id)
        return False

    async def close(self):
        if not self._closed:
            self._closed = True
            with move_on_after(5, shield=True):
                await self._disconnect()
            await self._on_close(self.id)


class W3Pool(object):
    """
    A bounded pool of AsyncWeb3 connections to one rpc endpoint.

    ``provider_path`` selects an http(s) or ws(s) endpoint, connections to it
    are opened lazily up to ``pool_size``. An injected ``provider`` is shared
    by a single connection.
    """

    def __init__(
        self,
        provider: Optional[AsyncBaseProvider] = None,
        provider_path: Optional[str] = None,
        pool_size: int = 1,
        timeout: int = 10,
    ) -> None:
        if provider is None:
            if provider_path is None:
                raise ValueError("provider and provider_path cannot be all None.")
            if not provider_path.startswith(("http", "ws")):
                raise ValueError(f"unsupported provider {provider_path}")
        elif pool_size != 1:
            warnings.warn("Pool size can only be 1 when a provider is given")
            pool_size = 1

        self._provider = provider
        self._provider_path = provider_path
        self._pool_size = pool_size
        self._timeout = timeout

        self._condition = Condition()
        self._idle: Deque[int] = deque(maxlen=pool_size)
        self._guards: Dict[int, W3Guard] = {}
        self._next_id = 1
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def _on_guard_idle(self, id: int):
        async with self._condition:
            if id in self._guards:
                self._idle.append(id)
                self._condition.notify(1)

    async def _on_guard_close(self, id: int):
        async with self._condition:
            if self._guards.pop(id, None) is not None:
                if id in self._idle:
                    self._idle.remove(id)
                # a slot is free again
                self._condition.notify(1)
                _logger.debug(f"w3 connection {id} is closed")

    def _ssl_context(self) -> ssl.SSLContext:
        return ssl.create_default_context(cafile=certifi.where())

    async def _connect(self):
        if self._provider is not None:
            return AsyncWeb3(self._provider), _noop

        assert self._provider_path is not None
        if self._provider_path.startswith("http"):
            session = ClientSession(
                timeout=ClientTimeout(self._timeout),
                connector=TCPConnector(ssl=self._ssl_context()),
                trust_env=True,
            )
            provider = AsyncHTTPProvider(self._provider_path)
            await provider.cache_async_session(session)
            return AsyncWeb3(provider), session.close

        ws_provider = WebSocketProvider(
            self._provider_path,
            websocket_kwargs={
                "open_timeout": self._timeout,
                "close_timeout": self._timeout,
                "ssl": self._ssl_context()
                if self._provider_path.startswith("wss")
                else None,
            },
        )
        w3 = AsyncWeb3(ws_provider)
        await ws_provider.connect()
        return w3, ws_provider.disconnect

    async def _new_guard(self) -> W3Guard:
        w3, disconnect = await self._connect()
        guard = W3Guard(
            id=self._next_id,
            w3=w3,
            disconnect=disconnect,
            on_idle=self._on_guard_idle,
            on_close=self._on_guard_close,
        )
        self._next_id += 1
        self._guards[guard.id] = guard
        _logger.debug(f"new w3 connection {guard.id}")
        return guard

    async def get(self) -> W3Guard:
        if self._closed:
            raise ValueError("w3 pool is closed")

        async with self._condition:
            while len(self._idle) == 0:
                if self._closed:
                    raise ValueError("w3 pool is closed")
                if len(self._guards) < self._pool_size:
                    return await self._new_guard()
                await self._condition.wait()

            return self._guards[self._idle.popleft()]

    async def close(self):
        if self._closed:
            return

        # guard.close() removes itself from self._guards
        for guard in list(self._guards.values()):
            await guard.close()

        async with self._condition:
            self._closed = True
            self._condition.notify_all()
        _logger.debug("w3 pool is closed")
