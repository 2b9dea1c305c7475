from typing import Any, ClassVar

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from docflow.logging.logger import Log
from docflow.storage.base import BaseStorageBackend
from docflow.storage.exceptions import StorageBackendUnavailableError, StorageNotFoundError
from docflow.storage.models import StorageMetadata


class S3StorageBackend(BaseStorageBackend):
    """Stores document bytes as objects in an S3 (or S3-compatible) bucket.

    Object keys follow ``<prefix>/<document_id>/<file_name>``; the prefix and
    bucket are fixed at construction.
    """

    name = "s3"

    _NOT_FOUND_CODES: ClassVar[frozenset[str]] = frozenset({"NoSuchKey", "404", "NotFound"})

    def __init__(
        self,
        *,
        bucket: str,
        prefix: str = "",
        region: str | None = None,
        endpoint_url: str | None = None,
        client: Any | None = None,
    ) -> None:
        if not bucket:
            raise ValueError("S3 storage requires a bucket name")
        self._bucket = bucket
        self._prefix = prefix.strip("/")
        self._client = client or boto3.client(
            "s3",
            region_name=region or None,
            endpoint_url=endpoint_url or None,
        )

    def put(self, data: bytes, metadata: StorageMetadata) -> str:
        key = self._key_for(metadata)
        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=data,
                ContentType=metadata.content_type,
                Metadata={"document_id": metadata.document_id},
            )
        except (ClientError, BotoCoreError) as exc:
            raise StorageBackendUnavailableError(
                f"S3 upload to s3://{self._bucket}/{key} failed: {exc}"
            ) from exc
        Log.debug(f"Stored {len(data)} bytes in S3", bucket=self._bucket, key=key)
        return key

    def get(self, locator: str) -> bytes:
        try:
            response = self._client.get_object(Bucket=self._bucket, Key=locator)
            body: bytes = response["Body"].read()
        except ClientError as exc:
            if self._is_not_found(exc):
                raise StorageNotFoundError(
                    f"Object not found: s3://{self._bucket}/{locator}"
                ) from exc
            raise StorageBackendUnavailableError(
                f"S3 download of s3://{self._bucket}/{locator} failed: {exc}"
            ) from exc
        except BotoCoreError as exc:
            raise StorageBackendUnavailableError(
                f"S3 download of s3://{self._bucket}/{locator} failed: {exc}"
            ) from exc
        return body

    def exists(self, locator: str) -> bool:
        try:
            self._client.head_object(Bucket=self._bucket, Key=locator)
        except ClientError as exc:
            if self._is_not_found(exc):
                return False
            raise StorageBackendUnavailableError(
                f"S3 head of s3://{self._bucket}/{locator} failed: {exc}"
            ) from exc
        except BotoCoreError as exc:
            raise StorageBackendUnavailableError(
                f"S3 head of s3://{self._bucket}/{locator} failed: {exc}"
            ) from exc
        return True

    def _key_for(self, metadata: StorageMetadata) -> str:
        key = f"{metadata.document_id}/{metadata.safe_file_name()}"
        return f"{self._prefix}/{key}" if self._prefix else key

    @classmethod
    def _is_not_found(cls, exc: ClientError) -> bool:
        code = str(exc.response.get("Error", {}).get("Code", ""))
        return code in cls._NOT_FOUND_CODES
