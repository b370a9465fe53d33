"""Publishing build output to S3-compatible storage."""

from .publisher import S3Publisher, VersionInfo

__all__ = ["S3Publisher", "VersionInfo"]
