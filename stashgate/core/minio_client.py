from __future__ import annotations

import io
import logging
import time
from datetime import timedelta
from functools import lru_cache, partial
from typing import Any, Callable, Protocol

import anyio
import anyio.to_thread
from minio import Minio
from minio.error import S3Error

from stashgate.core.config import settings
from stashgate.core.errors import UpstreamFailure, UpstreamTimeout
from stashgate.monitoring.setup import report_storage_call

logger = logging.getLogger("stashgate")


class ObjectStorage(Protocol):
    async def put(self, key: str, data: bytes, content_type: str) -> None: ...

    async def delete(self, key: str) -> None: ...

    async def presigned_get_url(self, key: str, ttl_seconds: int) -> str: ...

    async def ping(self) -> None: ...


class MinioObjectStorage:
    """Object store adapter over the synchronous MinIO client.

    Every call runs in the threadpool and is bounded by ``timeout`` seconds.
    A timeout surfaces as ``UpstreamTimeout``; any other client error as
    ``UpstreamFailure``. The caller only ever sees the generic message, the
    storage key stays in the log.
    """

    def __init__(self, client: Minio, bucket: str, timeout: float):
        self._client = client
        self._bucket = bucket
        self._timeout = timeout

    async def _call(self, operation: str, key: str | None, fn: Callable[..., Any], *args, **kwargs):
        started = time.perf_counter()
        ok = False
        try:
            with anyio.fail_after(self._timeout):
                # abandon the worker thread on timeout, the client call itself cannot be interrupted
                result = await anyio.to_thread.run_sync(partial(fn, *args, **kwargs), abandon_on_cancel=True)
            ok = True
            return result
        except TimeoutError as e:
            logger.error("Object store %s timed out after %.1fs key=%s", operation, self._timeout, key)
            raise UpstreamTimeout() from e
        except S3Error as e:
            logger.exception("Object store %s failed key=%s code=%s", operation, key, e.code)
            raise UpstreamFailure() from e
        except Exception as e:
            logger.exception("Object store %s failed key=%s: %s", operation, key, e)
            raise UpstreamFailure() from e
        finally:
            report_storage_call(operation, time.perf_counter() - started, ok)

    async def put(self, key: str, data: bytes, content_type: str) -> None:
        await self._call(
            "put",
            key,
            self._client.put_object,
            self._bucket,
            key,
            io.BytesIO(data),
            len(data),
            content_type=content_type,
        )
        logger.info("Object uploaded key=%s size=%s mime=%s", key, len(data), content_type)

    async def delete(self, key: str) -> None:
        await self._call("delete", key, self._client.remove_object, self._bucket, key)
        logger.info("Object deleted key=%s", key)

    async def presigned_get_url(self, key: str, ttl_seconds: int) -> str:
        return await self._call(
            "presign",
            key,
            self._client.presigned_get_object,
            self._bucket,
            key,
            expires=timedelta(seconds=ttl_seconds),
        )

    async def ping(self) -> None:
        exists = await self._call("ping", None, self._client.bucket_exists, self._bucket)
        if not exists:
            raise UpstreamFailure(f"Bucket '{self._bucket}' does not exist")


def create_minio_client() -> Minio:
    return Minio(
        settings.MINIO_ENDPOINT,
        access_key=settings.MINIO_ACCESS_KEY,
        secret_key=settings.MINIO_SECRET_KEY,
        secure=settings.MINIO_SECURE,
        region=settings.MINIO_REGION,
    )


@lru_cache
def _default_storage() -> MinioObjectStorage:
    logger.info("Object storage initialized endpoint=%s bucket=%s", settings.MINIO_ENDPOINT, settings.MINIO_BUCKET)
    return MinioObjectStorage(create_minio_client(), settings.MINIO_BUCKET, settings.STORAGE_TIMEOUT_SECONDS)


def get_storage() -> ObjectStorage:
    return _default_storage()
