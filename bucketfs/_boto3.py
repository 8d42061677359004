from __future__ import annotations

import logging
from typing import Any

from ._store import (
    DEFAULT_MAX_KEYS,
    GetResult,
    ListResult,
    NoSuchBucketError,
    NoSuchKeyError,
    StoreObject,
)

logger = logging.getLogger(__name__)

# DeleteObjects accepts at most this many keys per request
DELETE_BATCH_LIMIT = 1000

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


def _error_code(exc: Exception) -> str:
    response = getattr(exc, "response", None) or {}
    error = response.get("Error") or {}
    return str(error.get("Code") or "")


class Boto3StoreClient:
    """:class:`StoreClient` over a boto3 S3 client (AWS S3, MinIO, ...).

    Pass an existing ``client`` or keyword arguments for ``boto3.client``.
    """

    def __init__(self, client: Any | None = None, **client_kwargs: Any) -> None:
        if client is None:
            try:
                import boto3
            except Exception as exc:  # noqa: BLE001
                raise RuntimeError(
                    "boto3 is required for Boto3StoreClient (pip install bucketfs[s3])"
                ) from exc
            client = boto3.client("s3", **client_kwargs)
        self._client = client

    def _translate(self, exc: Exception, bucket: str, key: str) -> Exception:
        code = _error_code(exc)
        if code in _NOT_FOUND_CODES:
            return NoSuchKeyError(bucket, key)
        if code == "NoSuchBucket":
            return NoSuchBucketError(bucket)
        return exc

    def list_objects(
        self,
        bucket: str,
        prefix: str,
        *,
        delimiter: str | None = None,
        max_keys: int = DEFAULT_MAX_KEYS,
        start_after: str = "",
    ) -> ListResult:
        params: dict[str, Any] = {"Bucket": bucket, "Prefix": prefix, "MaxKeys": max_keys}
        if delimiter:
            params["Delimiter"] = delimiter
        if start_after:
            params["StartAfter"] = start_after
        logger.debug("list_objects_v2 %s", params)
        try:
            response = self._client.list_objects_v2(**params)
        except Exception as exc:  # noqa: BLE001
            err = self._translate(exc, bucket, prefix)
            if err is exc:
                raise
            raise err from exc
        return ListResult(
            objects=[
                StoreObject(key=obj["Key"], size=obj["Size"], modified_at=obj["LastModified"])
                for obj in response.get("Contents", []) or []
            ],
            common_prefixes=[
                p["Prefix"] for p in response.get("CommonPrefixes", []) or []
            ],
            truncated=bool(response.get("IsTruncated")),
        )

    def get_object(self, bucket: str, key: str) -> GetResult:
        logger.debug("get_object bucket=%s key=%r", bucket, key)
        try:
            response = self._client.get_object(Bucket=bucket, Key=key)
        except Exception as exc:  # noqa: BLE001
            err = self._translate(exc, bucket, key)
            if err is exc:
                raise
            raise err from exc
        return GetResult(
            body=response["Body"],
            size=response["ContentLength"],
            modified_at=response["LastModified"],
        )

    def put_object(self, bucket: str, key: str, data: bytes) -> None:
        logger.debug("put_object bucket=%s key=%r size=%d", bucket, key, len(data))
        self._client.put_object(Bucket=bucket, Key=key, Body=data)

    def delete_object(self, bucket: str, key: str) -> None:
        logger.debug("delete_object bucket=%s key=%r", bucket, key)
        self._client.delete_object(Bucket=bucket, Key=key)

    def delete_objects(self, bucket: str, keys: list[str]) -> list[str]:
        failed: list[str] = []
        chunks = [keys[i : i + DELETE_BATCH_LIMIT] for i in range(0, len(keys), DELETE_BATCH_LIMIT)]
        for chunk in chunks:
            logger.debug("delete_objects bucket=%s count=%d", bucket, len(chunk))
            response = self._client.delete_objects(
                Bucket=bucket,
                Delete={"Objects": [{"Key": key} for key in chunk], "Quiet": True},
            )
            for error in response.get("Errors", []) or []:
                logger.warning(
                    "delete_objects: failed to delete %r: %s %s",
                    error.get("Key"),
                    error.get("Code"),
                    error.get("Message"),
                )
                failed.append(error.get("Key", ""))
        return failed
