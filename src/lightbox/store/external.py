from typing import Any, BinaryIO

from lightbox.store.records import RecordStore
from lightbox.store.s3_service import AsyncS3Client


class ExternalStore:
    """The hosted backend as seen by the gallery: record collections plus binary storage.

    Every operation may fail with StoreError.
    """

    def __init__(self, records: RecordStore | None = None, binaries: AsyncS3Client | None = None):
        self.records = records or RecordStore()
        self.binaries = binaries or AsyncS3Client()

    @property
    def default_bucket(self) -> str:
        return self.binaries.settings.bucket

    async def select(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = True,
    ) -> list[dict[str, Any]]:
        return await self.records.select(collection, filters=filters, order_by=order_by, descending=descending)

    async def insert(self, collection: str, record: dict[str, Any]) -> dict[str, Any]:
        return await self.records.insert(collection, record)

    async def upload_binary(self, bucket: str | None, path: str, data: BinaryIO | bytes, content_type: str | None = None) -> str:
        return await self.binaries.upload_binary(bucket, path, data, content_type=content_type)

    def get_public_url(self, bucket: str | None, path: str) -> str:
        return self.binaries.get_public_url(bucket, path)

    async def close(self) -> None:
        await self.binaries.close()
