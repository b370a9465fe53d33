"""
Manifest Publishing
===================

Uploads a built output directory to S3-compatible storage (Cloudflare R2,
MinIO, AWS S3) and records the new manifest in the ``versions.json`` index.

Layout in the bucket::

    downloads/<downloadId><ext>   assets
    versions/<versionId>.json     one compiled manifest per publish
    versions.json                 list of every published version
"""

import json
import logging
from pathlib import Path
from urllib.parse import quote

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from winefonts.core.config import StorageConfig
from winefonts.core.exceptions import CorruptIndexError, PublishError, UploadFailedError
from winefonts.core.models import generate_uuid
from winefonts.manifest.hashing import compute_file_hash, file_size

logger = logging.getLogger(__name__)

DOWNLOADS_PREFIX = "downloads"
VERSIONS_PREFIX = "versions"
VERSIONS_INDEX_KEY = "versions.json"
MISSING_OBJECT_CODES = {"NoSuchKey", "404", "NotFound"}


class VersionInfo(BaseModel):
    """One entry of the ``versions.json`` index."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    version: str
    download_url: str = Field(..., alias="downloadURL")
    hash: str
    file_size: int = Field(..., ge=0, alias="fileSize")


class S3Publisher:
    """Uploads build output to an S3-compatible bucket."""

    def __init__(self, config: StorageConfig, client=None):
        """
        Args:
            config: Storage configuration
            client: Preconfigured boto3 S3 client (one is created from
                ``config`` when omitted)
        """
        self.config = config
        self.bucket_name = config.bucket_name
        self.s3_client = client or self._create_client()

    def _create_client(self):
        session = boto3.Session(
            aws_access_key_id=self.config.access_key_id,
            aws_secret_access_key=self.config.secret_access_key,
        )
        return session.client(
            "s3",
            endpoint_url=self.config.endpoint_url,
            region_name=self.config.region,
        )

    def public_url(self, *segments: str) -> str:
        """Public URL of an object, each path segment URL-encoded."""
        path = "/".join(quote(segment, safe="") for segment in segments)
        return f"{self.config.base_url.rstrip('/')}/{path}"

    def upload_file(self, local_path: Path, key: str, content_type: str | None = None) -> None:
        extra_args = {"ContentType": content_type} if content_type else {}
        try:
            self.s3_client.upload_file(
                str(local_path), self.bucket_name, key, ExtraArgs=extra_args
            )
        except (BotoCoreError, ClientError) as e:
            raise UploadFailedError(key, str(e)) from e
        logger.info(f"Uploaded {key}")

    def upload_assets(self, output_dir: Path, manifest_filename: str = "fonts.json") -> list[str]:
        """Upload every asset of ``output_dir`` except the manifest itself."""
        keys = []
        for asset in sorted(Path(output_dir).iterdir()):
            if not asset.is_file() or asset.name == manifest_filename:
                continue
            key = f"{DOWNLOADS_PREFIX}/{asset.name}"
            self.upload_file(asset, key)
            keys.append(key)

        logger.info(f"Uploaded {len(keys)} assets")
        return keys

    def load_versions(self) -> list[VersionInfo]:
        """Read the versions index; a missing index is an empty list."""
        try:
            response = self.s3_client.get_object(Bucket=self.bucket_name, Key=VERSIONS_INDEX_KEY)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code in MISSING_OBJECT_CODES:
                logger.warning(f"Failed to get {VERSIONS_INDEX_KEY}: {code}... Using empty list")
                return []
            raise PublishError(f"Failed to get {VERSIONS_INDEX_KEY}: {e}") from e
        except BotoCoreError as e:
            raise PublishError(f"Failed to get {VERSIONS_INDEX_KEY}: {e}") from e

        try:
            data = json.loads(response["Body"].read())
            return [VersionInfo.model_validate(item) for item in data]
        except (json.JSONDecodeError, TypeError, ValidationError) as e:
            raise CorruptIndexError(VERSIONS_INDEX_KEY, str(e)) from e

    def publish_manifest(
        self, manifest_path: Path, version: str, version_id: str | None = None
    ) -> VersionInfo:
        """Upload a compiled manifest and append it to the versions index."""
        versions = self.load_versions()

        version_id = version_id or generate_uuid()
        file_name = f"{version_id}.json"
        self.upload_file(manifest_path, f"{VERSIONS_PREFIX}/{file_name}", "application/json")

        info = VersionInfo(
            id=version_id,
            version=version,
            download_url=self.public_url(VERSIONS_PREFIX, file_name),
            hash=compute_file_hash(manifest_path),
            file_size=file_size(manifest_path),
        )
        versions.append(info)

        body = json.dumps([item.model_dump(mode="json", by_alias=True) for item in versions])
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=VERSIONS_INDEX_KEY,
                Body=body.encode("utf-8"),
                ContentType="application/json",
            )
        except (BotoCoreError, ClientError) as e:
            raise UploadFailedError(VERSIONS_INDEX_KEY, str(e)) from e

        logger.info(f"Published version {version} as {file_name}")
        return info

    def publish(
        self, output_dir: Path, version: str, manifest_filename: str = "fonts.json"
    ) -> VersionInfo:
        """Upload the assets of ``output_dir``, then its manifest."""
        self.upload_assets(output_dir, manifest_filename)
        return self.publish_manifest(Path(output_dir) / manifest_filename, version)
