"""
WaifuVault Python SDK

A Python client library for the WaifuVault file storage service.

Example usage:
    from waifuvault import WaifuVaultClient

    client = WaifuVaultClient()

    # Upload a file
    info = client.upload(file="document.pdf", expires="1h", password="secret")
    print(f"Download URL: {info.url}")

    # Download it again
    content = client.download_file(info.url, password="secret")
"""

import logging

from waifuvault.client import WaifuVaultClient
from waifuvault.exceptions import (
    WaifuVaultError,
    ValidationError,
    IoError,
    DecodeError,
    TransportError,
    ApiError,
    BadRequestError,
    PasswordRequiredError,
    NotFoundError,
    FileTooLargeError,
    RateLimitError,
)
from waifuvault.models import (
    Expiry,
    ExpiryUnit,
    LocalFile,
    RemoteUrl,
    RawBytes,
    UploadRequest,
    ModificationRequest,
    GetRequest,
    FileInfo,
    FileOptions,
    Bucket,
    Album,
    AlbumMetadata,
    GenericResponse,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__all__ = [
    "WaifuVaultClient",
    "WaifuVaultError",
    "ValidationError",
    "IoError",
    "DecodeError",
    "TransportError",
    "ApiError",
    "BadRequestError",
    "PasswordRequiredError",
    "NotFoundError",
    "FileTooLargeError",
    "RateLimitError",
    "Expiry",
    "ExpiryUnit",
    "LocalFile",
    "RemoteUrl",
    "RawBytes",
    "UploadRequest",
    "ModificationRequest",
    "GetRequest",
    "FileInfo",
    "FileOptions",
    "Bucket",
    "Album",
    "AlbumMetadata",
    "GenericResponse",
]
