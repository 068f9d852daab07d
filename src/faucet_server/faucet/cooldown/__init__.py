from .abc import CooldownCache
from .memory_impl import MemoryCooldownCache

__all__ = ["CooldownCache", "MemoryCooldownCache"]
