from datetime import UTC, datetime, timedelta

from lightbox.errors import StoreError


class DummyS3Settings:
    bucket = "photos"


class DummyAsyncS3Client:
    """Stands in for AsyncS3Client: records uploads, serves predictable public URLs."""

    def __init__(self, fail: bool = False):
        self.settings = DummyS3Settings()
        self.fail = fail
        self.uploads: list[tuple[str, str, bytes, str | None]] = []
        self.closed = False

    async def upload_binary(self, bucket, path, data, content_type=None) -> str:
        if self.fail:
            raise StoreError(f"Upload of {path} failed", operation="upload")
        self.uploads.append((bucket, path, data, content_type))
        return path

    def get_public_url(self, bucket, path) -> str:
        return f"https://cdn.example.com/{bucket}/{path}"

    async def close(self) -> None:
        self.closed = True


class FakeRecordReader:
    """In-memory record source with switchable failure, for controller tests."""

    def __init__(self, albums=None, photos=None):
        self.rows = {"albums": list(albums or []), "photos": list(photos or [])}
        self.fail_on: str | None = None
        self.calls: list[str] = []

    async def select(self, collection, filters=None, order_by=None, descending=True):
        self.calls.append(collection)
        if self.fail_on == collection:
            raise StoreError(f"Could not load {collection}", operation="select")
        return [dict(row) for row in self.rows[collection]]


def make_timestamps(count: int) -> list[datetime]:
    """Newest first, one minute apart."""
    start = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)
    return [start - timedelta(minutes=i) for i in range(count)]
