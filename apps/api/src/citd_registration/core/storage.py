"""
Object Storage Uploader

Pushes generated documents to S3 compatible storage and returns their
public URLs. Upload failures are returned as values, never raised, so the
submission pipeline decides what a missing URL means.
"""

import asyncio
import logging
import re
from dataclasses import dataclass
from pathlib import Path

import boto3
from boto3.exceptions import Boto3Error
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def sanitize_name(name: str | None, filler: str = "_") -> str:
    """
    Turn a free-text name into a safe file or key component.

    Whitespace runs collapse to ``filler``; anything outside letters, digits,
    dot, dash and underscore is dropped. Empty input gives "applicant".
    """
    collapsed = re.sub(r"\s+", filler, (name or "").strip())
    cleaned = _UNSAFE_KEY_CHARS.sub("", collapsed).strip("._")
    return cleaned or "applicant"


@dataclass(frozen=True)
class UploadResult:
    """Outcome of one upload: a URL on success, an error message otherwise."""

    key: str
    url: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.url is not None


class StorageUploader:
    """S3 uploader created once at startup."""

    def __init__(
        self,
        bucket: str,
        prefix: str = "citd-forms",
        region: str = "ap-south-1",
        endpoint_url: str | None = None,
        public_base_url: str | None = None,
        access_key_id: str | None = None,
        secret_access_key: str | None = None,
        timeout_seconds: float = 60.0,
        client=None,
    ):
        self.bucket = bucket
        self.prefix = prefix.strip("/")
        self.region = region
        self.endpoint_url = endpoint_url
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        self.timeout_seconds = timeout_seconds
        self._client = client or boto3.client(
            "s3",
            region_name=region,
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            config=Config(
                connect_timeout=10,
                read_timeout=timeout_seconds,
                retries={"max_attempts": 3, "mode": "standard"},
            ),
        )

    def object_key(self, local_path: Path, owner_name: str | None) -> str:
        """Namespaced key: ``<prefix>/<owner>_<file name>``."""
        name = f"{sanitize_name(owner_name)}_{Path(local_path).name}"
        return f"{self.prefix}/{name}" if self.prefix else name

    def public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def _upload_sync(self, local_path: Path, key: str) -> None:
        extra_args = {"ContentType": "application/pdf"} if key.endswith(".pdf") else None
        self._client.upload_file(str(local_path), self.bucket, key, ExtraArgs=extra_args)

    async def upload(self, local_path: Path, owner_name: str | None) -> UploadResult:
        """
        Upload a local file. The local copy is left in place.

        Args:
            local_path: File to upload
            owner_name: Applicant name used to namespace the object key

        Returns:
            UploadResult with the public URL, or with ``error`` set on failure
        """
        key = self.object_key(local_path, owner_name)
        try:
            await asyncio.wait_for(
                asyncio.to_thread(self._upload_sync, Path(local_path), key),
                timeout=self.timeout_seconds,
            )
        except TimeoutError:
            logger.error(f"Upload of {local_path} timed out after {self.timeout_seconds}s")
            return UploadResult(key=key, error="timeout")
        except (Boto3Error, BotoCoreError, ClientError, OSError) as e:
            logger.error(f"Upload of {local_path} to s3://{self.bucket}/{key} failed: {e}")
            return UploadResult(key=key, error=str(e))

        url = self.public_url(key)
        logger.info(f"Uploaded {Path(local_path).name} to {url}")
        return UploadResult(key=key, url=url)
