from abc import ABC, abstractmethod

from eth_typing import ChecksumAddress


class CooldownCache(ABC):
    @abstractmethod
    async def check(self, address: ChecksumAddress):
        """Raise CooldownError if address received funds within the cooldown."""

    @abstractmethod
    async def record(self, address: ChecksumAddress): ...
