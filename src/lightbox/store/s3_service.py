"""
Asynchronous S3 Client Service

Binary storage of the hosted backend. Uploads go through aioboto3 so they do
not block the event loop; public URLs are derived from configuration and
need no network round trip.
"""

import io
import logging
from functools import lru_cache
from typing import TYPE_CHECKING, BinaryIO
from urllib.parse import quote

import aioboto3
from boto3.s3.transfer import TransferConfig
from botocore.config import Config
from pydantic_settings import BaseSettings, SettingsConfigDict

from lightbox.errors import StoreError

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client


class S3Settings(BaseSettings):
    """Configuration for the S3 client"""

    endpoint: str = "localhost:9000"
    access_key: str = "minioadmin"
    secret_key: str = "minioadmin"
    bucket: str = "photos"
    region: str = "us-east-1"
    use_ssl: bool = False
    signature_version: str = "s3v4"
    # Base URL the bucket is publicly served from, defaults to the endpoint
    public_url: str | None = None

    model_config = SettingsConfigDict(
        env_prefix="S3_",
        env_file=".env",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_s3_settings() -> S3Settings:
    """Get cached S3 settings."""
    return S3Settings()


class AsyncS3Client:
    """Asynchronous S3 Client

    This client maintains a shared aioboto3.Session that is created once and
    reused for all operations. Individual S3 clients are created per operation
    using context managers to ensure proper resource cleanup.
    """

    def __init__(self, settings: S3Settings | None = None):
        self.settings = settings or get_s3_settings()
        self._session: aioboto3.Session | None = None
        self._endpoint_url = self._get_endpoint_url()
        self._config = Config(
            signature_version=self.settings.signature_version,
            max_pool_connections=50,
            retries={"max_attempts": 3, "mode": "standard"},
            connect_timeout=10,
            read_timeout=60,
            s3={"addressing_style": "path"},
        )
        self._transfer_config = TransferConfig(
            multipart_threshold=8 * 1024 * 1024,
            multipart_chunksize=4 * 1024 * 1024,
            max_concurrency=10,
            use_threads=True,
        )
        logger.info(f"AsyncS3Client initialized: endpoint={self._endpoint_url}, bucket={self.settings.bucket}, region={self.settings.region}")

    def _get_endpoint_url(self) -> str:
        """Get the endpoint URL with protocol if needed."""
        endpoint = self.settings.endpoint
        if not endpoint.startswith(("http://", "https://")):
            protocol = "https" if self.settings.use_ssl else "http"
            return f"{protocol}://{endpoint}"
        return endpoint

    @property
    def session(self) -> aioboto3.Session:
        """Get or create the shared aioboto3 session."""
        if self._session is None:
            self._session = aioboto3.Session(
                aws_access_key_id=self.settings.access_key,
                aws_secret_access_key=self.settings.secret_key,
                region_name=self.settings.region,
            )
        return self._session

    def _get_s3_client(self) -> "S3Client":
        """Get configured S3 client context manager.

        Usage: async with self._get_s3_client() as s3:
        """
        return self.session.client("s3", endpoint_url=self._endpoint_url, config=self._config)

    async def upload_binary(
        self,
        bucket: str | None,
        path: str,
        data: BinaryIO | bytes,
        content_type: str | None = None,
    ) -> str:
        """Store a binary object.

        Args:
            bucket: Target bucket, None for the configured default
            path: Object key inside the bucket
            data: File-like object or bytes to upload
            content_type: Optional Content-Type header (e.g., 'image/jpeg')

        Returns:
            Object key of the stored object

        Raises:
            StoreError: If the upload fails
        """
        bucket = bucket or self.settings.bucket
        if isinstance(data, bytes):
            data = io.BytesIO(data)
        elif hasattr(data, "seek"):
            data.seek(0)

        extra_args = {"ContentType": content_type} if content_type else None

        try:
            async with self._get_s3_client() as s3:
                s3: "S3Client"
                await s3.upload_fileobj(data, bucket, path, ExtraArgs=extra_args, Config=self._transfer_config)
        except Exception as e:
            logger.error(f"Failed to upload object {bucket}/{path}: {e}")
            raise StoreError(f"Upload of {path} failed", operation="upload") from e

        logger.info(f"Successfully uploaded object: {bucket}/{path}")
        return path

    def get_public_url(self, bucket: str | None, path: str) -> str:
        """Build the stable public URL of a stored object."""
        bucket = bucket or self.settings.bucket
        base = (self.settings.public_url or self._endpoint_url).rstrip("/")
        return f"{base}/{bucket}/{quote(path)}"

    async def close(self) -> None:
        """Close the session and clean up resources."""
        if self._session is not None:
            logger.info("Closing AsyncS3Client session")
            self._session = None
