"""Tree source implementations."""

from .base import NotFoundError, Provider, ProviderError
from .fs import FSProvider
from .memory import MemoryProvider

__all__ = ["FSProvider", "MemoryProvider", "NotFoundError", "Provider", "ProviderError"]
