"""Storage port for uploaded media."""

from abc import ABC, abstractmethod


class StoragePort(ABC):
    @abstractmethod
    def save(self, name: str, data: bytes, content_type: str) -> str:
        """Persist `data` under `name` and return its public URL."""
        ...
