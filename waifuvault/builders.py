"""
WaifuVault Request Builders

Turn request models into ``PreparedRequest`` descriptions. Every check runs
here, so a bad request fails before anything is sent.
"""

import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, Field

from waifuvault.exceptions import IoError, ValidationError
from waifuvault.models import (
    GetRequest,
    LocalFile,
    ModificationRequest,
    RawBytes,
    RemoteUrl,
    UploadRequest,
)

logger = logging.getLogger(__name__)

PASSWORD_HEADER = "x-password"

# Tokens become URL path segments (alphanumeric, dash, underscore)
TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


class PreparedRequest(BaseModel):
    """Everything the transport needs to perform one HTTP call."""

    method: str
    url: str
    params: Dict[str, str] = Field(default_factory=dict)
    headers: Dict[str, str] = Field(default_factory=dict)
    json_body: Optional[Any] = None
    data: Dict[str, str] = Field(default_factory=dict)
    files: Dict[str, Tuple[str, bytes]] = Field(default_factory=dict)


def _bool_param(value: bool) -> str:
    return "true" if value else "false"


def _join(base_url: str, *segments: str) -> str:
    return "/".join([base_url.rstrip("/"), *segments])


def validate_token(token: str, what: str = "Token") -> None:
    """Reject empty tokens and tokens that are not a single safe path segment."""
    if not isinstance(token, str) or not token.strip():
        raise ValidationError(f"{what} cannot be empty")
    if not TOKEN_PATTERN.match(token):
        raise ValidationError(
            f"Invalid {what.lower()} format. Must contain only alphanumeric characters, "
            f"dashes, and underscores."
        )


def validate_file_tokens(file_tokens: Iterable[str]) -> List[str]:
    """Return the tokens as a list, rejecting an empty set or an empty token."""
    if isinstance(file_tokens, str):
        raise ValidationError("File tokens must be a list of tokens, not a single string")
    tokens = list(file_tokens)
    if not tokens:
        raise ValidationError("At least one file token is required")
    for token in tokens:
        validate_token(token, "File token")
    return tokens


def _read_local_file(source: LocalFile) -> bytes:
    """Read the whole file into memory; the transport only ever sees bytes."""
    try:
        with open(source.path, "rb") as f:
            return f.read()
    except OSError as e:
        raise IoError(f"Could not read file {source.path}: {e.strerror or e}") from e


# ==================== Files ====================


def build_upload_request(base_url: str, request: UploadRequest) -> PreparedRequest:
    """
    Build the multipart (or form) PUT that uploads content.

    Args:
        base_url: REST root of the service
        request: Content source and storage options

    Returns:
        PreparedRequest for ``PUT {base}`` or ``PUT {base}/{bucket}``

    Raises:
        ValidationError: If no source is set, a bytes source has no filename,
            or the bucket token is empty
        IoError: If a local file cannot be read
    """
    source = request.source
    if source is None:
        raise ValidationError("Need either a file, url, or bytes to upload")

    if request.bucket is not None:
        validate_token(request.bucket, "Bucket token")
        url = _join(base_url, request.bucket)
    else:
        url = _join(base_url)

    params: Dict[str, str] = {}
    if request.expires is not None:
        params["expires"] = str(request.expires)
    if request.hide_filename is not None:
        params["hide_filename"] = _bool_param(request.hide_filename)
    if request.one_time_download is not None:
        params["one_time_download"] = _bool_param(request.one_time_download)

    data: Dict[str, str] = {}
    files: Dict[str, Tuple[str, bytes]] = {}

    if isinstance(source, RemoteUrl):
        if not source.url:
            raise ValidationError("Upload URL cannot be empty")
        data["url"] = source.url
    elif isinstance(source, RawBytes):
        if not source.filename:
            raise ValidationError("A filename is required when uploading raw bytes")
        files["file"] = (source.filename, source.data)
    else:
        filename = source.upload_name
        if not filename:
            raise ValidationError(f"Cannot derive a filename from {source.path}")
        content = _read_local_file(source)
        logger.debug("Read %d bytes from %s for upload", len(content), source.path)
        files["file"] = (filename, content)

    if request.password is not None:
        data["password"] = request.password

    return PreparedRequest(method="PUT", url=url, params=params, data=data, files=files)


def build_file_info_request(base_url: str, request: GetRequest) -> PreparedRequest:
    """Build ``GET {base}/{token}?formatted=...``."""
    validate_token(request.token, "File token")
    return PreparedRequest(
        method="GET",
        url=_join(base_url, request.token),
        params={"formatted": _bool_param(request.formatted)},
    )


def build_modification_request(base_url: str, request: ModificationRequest) -> PreparedRequest:
    """
    Build the PATCH that changes a stored file's options.

    Only the fields set on ``request`` end up in the JSON body. Whether a
    previous password is needed is decided by the server.

    Raises:
        ValidationError: If the token is empty or nothing would change
    """
    validate_token(request.token, "File token")
    payload = request.to_payload()
    if not payload:
        raise ValidationError(
            "Modification must set at least one of password, previous_password, "
            "custom_expiry or hide_filename"
        )
    return PreparedRequest(method="PATCH", url=_join(base_url, request.token), json_body=payload)


def build_delete_file_request(base_url: str, token: str) -> PreparedRequest:
    validate_token(token, "File token")
    return PreparedRequest(method="DELETE", url=_join(base_url, token))


def build_download_request(url: str, password: Optional[str] = None) -> PreparedRequest:
    """Build a GET on a file's content URL, passing the password as a header."""
    if not url:
        raise ValidationError("Download URL cannot be empty")
    headers = {}
    if password is not None:
        headers[PASSWORD_HEADER] = password
    return PreparedRequest(method="GET", url=url, headers=headers)


# ==================== Buckets ====================


def build_create_bucket_request(base_url: str) -> PreparedRequest:
    return PreparedRequest(method="GET", url=_join(base_url, "bucket", "create"))


def build_delete_bucket_request(base_url: str, token: str) -> PreparedRequest:
    validate_token(token, "Bucket token")
    return PreparedRequest(method="DELETE", url=_join(base_url, "bucket", token))


def build_get_bucket_request(base_url: str, token: str) -> PreparedRequest:
    validate_token(token, "Bucket token")
    return PreparedRequest(
        method="POST",
        url=_join(base_url, "bucket", "get"),
        json_body={"bucket_token": token},
    )


# ==================== Albums ====================


def build_create_album_request(base_url: str, bucket_token: str, name: str) -> PreparedRequest:
    validate_token(bucket_token, "Bucket token")
    if not name or not name.strip():
        raise ValidationError("Album name cannot be empty")
    return PreparedRequest(
        method="POST",
        url=_join(base_url, "album", bucket_token),
        json_body={"name": name},
    )


def build_associate_request(
    base_url: str, album_token: str, file_tokens: Iterable[str]
) -> PreparedRequest:
    validate_token(album_token, "Album token")
    tokens = validate_file_tokens(file_tokens)
    return PreparedRequest(
        method="POST",
        url=_join(base_url, "album", album_token, "associate"),
        json_body={"fileTokens": tokens},
    )


def build_disassociate_request(
    base_url: str, album_token: str, file_tokens: Iterable[str]
) -> PreparedRequest:
    validate_token(album_token, "Album token")
    tokens = validate_file_tokens(file_tokens)
    return PreparedRequest(
        method="POST",
        url=_join(base_url, "album", album_token, "disassociate"),
        json_body={"fileTokens": tokens},
    )


def build_delete_album_request(
    base_url: str, album_token: str, delete_files: bool = False
) -> PreparedRequest:
    validate_token(album_token, "Album token")
    return PreparedRequest(
        method="DELETE",
        url=_join(base_url, "album", album_token),
        params={"deleteFiles": _bool_param(delete_files)},
    )


def build_get_album_request(base_url: str, album_token: str) -> PreparedRequest:
    validate_token(album_token, "Album token")
    return PreparedRequest(method="GET", url=_join(base_url, "album", album_token))


def build_share_album_request(base_url: str, album_token: str) -> PreparedRequest:
    validate_token(album_token, "Album token")
    return PreparedRequest(method="GET", url=_join(base_url, "album", "share", album_token))


def build_revoke_album_request(base_url: str, album_token: str) -> PreparedRequest:
    validate_token(album_token, "Album token")
    return PreparedRequest(method="GET", url=_join(base_url, "album", "revoke", album_token))


def build_download_album_request(
    base_url: str, album_token: str, file_ids: Optional[Iterable[int]] = None
) -> PreparedRequest:
    """Build the POST that zips an album; no ids means the whole album."""
    validate_token(album_token, "Album token")
    return PreparedRequest(
        method="POST",
        url=_join(base_url, "album", "download", album_token),
        json_body=list(file_ids) if file_ids is not None else [],
    )
