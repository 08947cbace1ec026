"""Object-storage adapter placeholder.

Selected with UPLOAD_BACKEND=object. No provider SDK is wired in yet.
"""

from storefront.media.storage.port import StoragePort


class ObjectStoreStorage(StoragePort):
    def __init__(self, bucket: str | None = None) -> None:
        self.bucket = bucket

    def save(self, name: str, data: bytes, content_type: str) -> str:
        raise NotImplementedError("ObjectStoreStorage.save() is not implemented. Configure UPLOAD_BACKEND=local.")
