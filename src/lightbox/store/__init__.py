# External store package

from .external import ExternalStore
from .records import COLLECTIONS, RecordStore
from .s3_service import AsyncS3Client, S3Settings, get_s3_settings

__all__ = [
    "COLLECTIONS",
    "AsyncS3Client",
    "ExternalStore",
    "RecordStore",
    "S3Settings",
    "get_s3_settings",
]
