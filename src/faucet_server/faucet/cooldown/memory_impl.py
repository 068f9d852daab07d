import math
from datetime import datetime, timedelta
from typing import Callable, Dict

from eth_typing import ChecksumAddress

from ..errors import CooldownError
from .abc import CooldownCache


class MemoryCooldownCache(CooldownCache):
    """
    Last successful dispense time per address, kept in process memory.

    Entries older than the cooldown are dropped on every record, so the map
    only holds addresses that are still cooling down.
    """

    def __init__(
        self,
        cooldown: timedelta,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._cooldown = cooldown
        self._now = now
        self._last_times: Dict[ChecksumAddress, datetime] = {}

    async def check(self, address: ChecksumAddress):
        last_time = self._last_times.get(address)
        if last_time is None:
            return
        remaining = last_time + self._cooldown - self._now()
        if remaining > timedelta(0):
            retry_after = math.ceil(remaining.total_seconds())
            minutes = math.ceil(retry_after / 60)
            raise CooldownError(
                f"This address has recently received test ETH. Please try again in {minutes} minute(s).",
                retry_after=retry_after,
            )

    async def record(self, address: ChecksumAddress):
        now = self._now()
        self._last_times = {
            addr: t
            for addr, t in self._last_times.items()
            if t + self._cooldown > now
        }
        self._last_times[address] = now

    def __len__(self) -> int:
        return len(self._last_times)
