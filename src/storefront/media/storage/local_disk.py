"""Stores uploads on the local filesystem, served by the app under /uploads."""

from pathlib import Path

from storefront.media.storage.port import StoragePort

PUBLIC_PREFIX = "/uploads"


class LocalDiskStorage(StoragePort):
    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def save(self, name: str, data: bytes, content_type: str) -> str:  # noqa: ARG002
        self.root.mkdir(parents=True, exist_ok=True)
        (self.root / name).write_bytes(data)
        return f"{PUBLIC_PREFIX}/{name}"
