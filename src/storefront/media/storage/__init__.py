"""Upload storage registry. Local disk unless UPLOAD_BACKEND=object."""

from storefront.config import get_settings
from storefront.media.storage.port import StoragePort

_storage: StoragePort | None = None


def get_storage() -> StoragePort:
    global _storage
    if _storage is None:
        settings = get_settings()
        if settings.upload_backend == "object":
            from storefront.media.storage.object_store import ObjectStoreStorage

            _storage = ObjectStoreStorage()
        else:
            from storefront.media.storage.local_disk import LocalDiskStorage

            _storage = LocalDiskStorage(settings.upload_dir)
    return _storage


def set_storage(storage: StoragePort) -> None:
    global _storage
    _storage = storage


def reset_storage() -> None:
    global _storage
    _storage = None
