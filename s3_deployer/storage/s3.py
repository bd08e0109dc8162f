# s3_deployer/storage/s3.py
"""AWS S3 storage backend"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Optional, Any

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import ClientError

from .base import ListResult, StorageBackend, StoredObject
from ..api.exceptions import ObjectNotFoundError, StorageError
from ..constants import DEFAULT_UPLOAD_WORKERS

logger = logging.getLogger(__name__)

NOT_FOUND_CODES = {"NoSuchKey", "404", "NotFound"}


class S3Storage(StorageBackend):
    """AWS S3 (and S3-compatible) storage implementation

    boto3 is blocking, so every call runs on a thread pool owned by the
    backend. The pool and the client's connection pool are both sized to
    ``max_workers`` so that many transfers can be in flight at once.
    """

    def __init__(self, config: Dict[str, Any] = None, client=None):
        """
        Initialize S3 storage

        Args:
            config: S3 configuration including:
                - bucket: S3 bucket name
                - region: AWS region
                - endpoint_url: Custom endpoint (for S3-compatible services)
                - access_key_id / secret_access_key / session_token: credentials,
                  falling back to the default boto3 credential chain
                - max_workers: Concurrent S3 calls (default 20)
            client: Pre-built boto3 S3 client
        """
        super().__init__(config)
        self.bucket = self.config.get('bucket')
        if not self.bucket:
            raise StorageError("S3 storage requires 'bucket'")
        self.max_workers = int(self.config.get('max_workers') or DEFAULT_UPLOAD_WORKERS)
        self.client = client
        self._owns_client = client is None
        self._executor: Optional[ThreadPoolExecutor] = None

    async def _do_initialize(self) -> None:
        """Create the thread pool and, unless one was given, the boto3 client"""
        self._executor = ThreadPoolExecutor(
            max_workers=self.max_workers,
            thread_name_prefix="s3-deployer"
        )
        if self.client is not None:
            return

        session = boto3.session.Session(
            aws_access_key_id=self.config.get('access_key_id'),
            aws_secret_access_key=self.config.get('secret_access_key'),
            aws_session_token=self.config.get('session_token'),
            region_name=self.config.get('region'),
        )
        # Retries are driven by ObjectStore's own schedule
        self.client = session.client(
            "s3",
            endpoint_url=self.config.get('endpoint_url'),
            config=BotoConfig(
                retries={"max_attempts": 1, "mode": "standard"},
                max_pool_connections=self.max_workers,
            ),
        )
        logger.debug(f"S3 client ready for bucket {self.bucket}")

    async def _run(self, func):
        return await asyncio.get_running_loop().run_in_executor(self._executor, func)

    async def get_object(self, key: str) -> StoredObject:
        """Read object from S3"""
        await self.initialize()

        def _get():
            try:
                response = self.client.get_object(Bucket=self.bucket, Key=key)
            except ClientError as e:
                if e.response.get("Error", {}).get("Code") in NOT_FOUND_CODES:
                    raise ObjectNotFoundError(key) from e
                raise
            return StoredObject(
                key=key,
                body=response["Body"].read(),
                content_type=response.get("ContentType"),
                content_encoding=response.get("ContentEncoding"),
                cache_control=response.get("CacheControl"),
            )

        return await self._run(_get)

    async def put_object(self, obj: StoredObject) -> None:
        """Write object to S3"""
        await self.initialize()

        extra = {"ACL": obj.acl}
        if obj.content_type:
            extra["ContentType"] = obj.content_type
        if obj.content_encoding:
            extra["ContentEncoding"] = obj.content_encoding
        if obj.cache_control:
            extra["CacheControl"] = obj.cache_control

        def _put():
            self.client.put_object(
                Bucket=self.bucket,
                Key=obj.key,
                Body=obj.body,
                **extra
            )

        await self._run(_put)

    async def list_objects(self, prefix: str = "",
                           delimiter: Optional[str] = None) -> ListResult:
        """List objects in S3 with prefix"""
        await self.initialize()

        def _list():
            result = ListResult()
            params = {"Bucket": self.bucket, "Prefix": prefix}
            if delimiter:
                params["Delimiter"] = delimiter

            paginator = self.client.get_paginator("list_objects_v2")
            for page in paginator.paginate(**params):
                for obj in page.get("Contents", []):
                    result.keys.append(obj["Key"])
                for common in page.get("CommonPrefixes", []):
                    result.prefixes.append(common["Prefix"])

            result.keys.sort()
            result.prefixes.sort()
            return result

        return await self._run(_list)

    async def _do_close(self) -> None:
        """Shut down the thread pool and release the client if this backend created it"""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        if self._owns_client:
            self.client = None
