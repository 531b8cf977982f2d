"""
Media storage abstraction for S3-compatible object storage, local disk and in-memory testing.
"""

from __future__ import annotations

import os
import shutil
import uuid
from dataclasses import dataclass
from typing import BinaryIO, Optional, Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError


# Formats accepted by the remote provider: images plus one video format.
ALLOWED_REMOTE_FORMATS = ("jpg", "png", "jpeg", "mp4")


class StorageError(Exception):
    """Any fault raised while storing an uploaded file."""


class UnsupportedFileFormatError(ValueError):
    def __init__(self, extension: str):
        super().__init__(f"Unsupported file format: {extension or 'none'}")
        self.extension = extension


class StorageClient(Protocol):
    """Defines the operations the API needs from media storage."""

    def save_upload(
        self, fileobj: BinaryIO, filename: str, content_type: Optional[str] = None
    ) -> str:
        """Store one file and return a URL it can be fetched from."""
        ...


def file_extension(filename: str) -> str:
    return os.path.splitext(filename or "")[1].lstrip(".").lower()


def generated_name(filename: str) -> str:
    extension = file_extension(filename)
    name = uuid.uuid4().hex
    return f"{name}.{extension}" if extension else name


@dataclass
class InMemoryStorageClient:
    """Test double for storage interactions."""

    base_url: str = "https://example.test/storage"
    stored_objects: dict = None

    def __post_init__(self):
        if self.stored_objects is None:
            self.stored_objects = {}

    def save_upload(
        self, fileobj: BinaryIO, filename: str, content_type: Optional[str] = None
    ) -> str:
        key = generated_name(filename)
        self.stored_objects[key] = fileobj.read()
        return f"{self.base_url}/{key}"


@dataclass
class LocalStorageClient:
    """
    Writes uploads to a local directory. Used when no remote provider is
    configured; the directory is served by the app under ``url_prefix``.
    No format restriction applies here.
    """

    directory: str
    url_prefix: str = "/uploads"

    def save_upload(
        self, fileobj: BinaryIO, filename: str, content_type: Optional[str] = None
    ) -> str:
        name = generated_name(filename)
        try:
            os.makedirs(self.directory, exist_ok=True)
            with open(os.path.join(self.directory, name), "wb") as f:
                shutil.copyfileobj(fileobj, f)
        except OSError as exc:
            raise StorageError(str(exc)) from exc
        return f"{self.url_prefix.rstrip('/')}/{name}"


@dataclass
class S3StorageClient:
    """
    S3-compatible storage client for the remote media provider.
    """

    bucket: str
    region: str
    endpoint: str
    access_key_id: str
    secret_access_key: str
    folder: str = "ddr_uploads"
    public_base_url: str = ""
    allowed_formats: tuple = ALLOWED_REMOTE_FORMATS

    def __post_init__(self):
        # Use virtual-hosted style addressing to satisfy most providers.
        config = Config(
            s3={"addressing_style": "virtual"},
            signature_version="s3v4",
        )
        self._client = boto3.client(
            "s3",
            endpoint_url=self.endpoint or None,
            region_name=self.region or None,
            aws_access_key_id=self.access_key_id or None,
            aws_secret_access_key=self.secret_access_key or None,
            config=config,
        )

    def public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{key}"
        if self.endpoint:
            return f"{self.endpoint.rstrip('/')}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.amazonaws.com/{key}"

    def save_upload(
        self, fileobj: BinaryIO, filename: str, content_type: Optional[str] = None
    ) -> str:
        extension = file_extension(filename)
        if extension not in self.allowed_formats:
            raise UnsupportedFileFormatError(extension)
        key = f"{self.folder.strip('/')}/{generated_name(filename)}"
        extra_args = {"ContentType": content_type} if content_type else None
        try:
            self._client.upload_fileobj(
                fileobj, self.bucket, key, ExtraArgs=extra_args
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(str(exc)) from exc
        return self.public_url(key)
