"""Byte-stream access to local files and S3-compatible object storage."""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import BinaryIO, Iterator, Optional, Tuple

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from deltagraph.config import CONFIG
from deltagraph.exceptions import SourceUnavailable


def _read_secret(key: str) -> str:
    return str(os.getenv(key, "") or "").strip()


def split_remote_path(path: str) -> Tuple[str, str]:
    """Split '<bucket>/<key>' at the final slash."""
    if "/" not in path:
        raise SourceUnavailable(path, "remote paths must look like '<bucket>/<key>'")
    bucket, key = path.rsplit("/", 1)
    if not bucket or not key:
        raise SourceUnavailable(path, "remote paths must look like '<bucket>/<key>'")
    return bucket, key


def _storage_client(region: str, endpoint: str):
    session = boto3.session.Session()
    access_key = _read_secret("AWS_ACCESS_KEY_ID")
    secret_key = _read_secret("AWS_SECRET_ACCESS_KEY")
    kwargs = {"region_name": region or None}
    if endpoint:
        kwargs["endpoint_url"] = endpoint.rstrip("/")
    if access_key and secret_key:
        kwargs["aws_access_key_id"] = access_key
        kwargs["aws_secret_access_key"] = secret_key
    return session.client("s3", **kwargs)


class SourceResolver:
    """Open a path either on the local filesystem or in remote object storage.

    The backend is picked once, from `remote` (default CONFIG["REMOTE_STORAGE"]).
    A ready S3 client can be passed in; otherwise one is built lazily from the
    region and endpoint settings.
    """

    def __init__(
        self,
        remote: Optional[bool] = None,
        region: Optional[str] = None,
        endpoint: Optional[str] = None,
        client=None,
    ) -> None:
        self.remote = CONFIG["REMOTE_STORAGE"] if remote is None else remote
        self.region = CONFIG["REGION"] if region is None else region
        self.endpoint = CONFIG["S3_ENDPOINT"] if endpoint is None else endpoint
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = _storage_client(self.region, self.endpoint)
        return self._client

    def open(self, path: str) -> BinaryIO:
        """Return a readable binary stream; the caller must close it."""
        if self.remote:
            return self._open_remote(path)
        return self._open_local(path)

    def _open_local(self, path: str) -> BinaryIO:
        if not os.path.isfile(path):
            raise SourceUnavailable(path, "no such file")
        try:
            return open(path, "rb")
        except OSError as exc:
            raise SourceUnavailable(path, str(exc)) from exc

    def _open_remote(self, path: str) -> BinaryIO:
        bucket, key = split_remote_path(path)
        logging.info("Downloading object from remote storage - Bucket: %s - Key: %s", bucket, key)
        try:
            response = self.client.get_object(Bucket=bucket, Key=key)
        except (BotoCoreError, ClientError, ValueError) as exc:
            raise SourceUnavailable(path, str(exc)) from exc
        body = response.get("Body")
        if body is None:
            raise SourceUnavailable(path, "object has no body")
        return body


@contextmanager
def open_source(path: str, resolver: Optional[SourceResolver] = None) -> Iterator[BinaryIO]:
    """Open `path` through `resolver` and always close the stream afterwards."""
    stream = (resolver or SourceResolver()).open(path)
    try:
        yield stream
    finally:
        stream.close()
