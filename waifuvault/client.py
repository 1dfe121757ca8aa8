"""
WaifuVault Client

Main client class for interacting with the WaifuVault API.
"""

import logging
import os
import warnings
from pathlib import Path
from typing import Iterable, List, Optional, Type, TypeVar, Union

import httpx
from pydantic import StrictBool, TypeAdapter
from pydantic import ValidationError as SchemaError

from waifuvault import builders
from waifuvault.builders import PreparedRequest
from waifuvault.exceptions import (
    DecodeError,
    TransportError,
    ValidationError,
    raise_for_status,
)
from waifuvault.models import (
    Album,
    Bucket,
    ErrorEnvelope,
    Expiry,
    FileInfo,
    GenericResponse,
    GetRequest,
    ModificationRequest,
    UploadRequest,
    build_model,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://waifuvault.moe/rest"
BASE_URL_ENV = "WAIFUVAULT_BASE_URL"
USER_AGENT = "WaifuVault-Python-SDK/0.1.0"

T = TypeVar("T")


class WaifuVaultClient:
    """
    WaifuVault API client.

    Provides methods for uploading, downloading and managing files, buckets
    and albums on a WaifuVault server. Every method performs exactly one
    request; nothing is cached or retried.

    Example:
        >>> client = WaifuVaultClient()
        >>> info = client.upload(file="document.pdf", expires="1h")
        >>> print(f"Download URL: {info.url}")
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 60.0,
        verify_ssl: bool = True,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        """
        Initialize WaifuVault client.

        Args:
            base_url: REST root of the server (default: $WAIFUVAULT_BASE_URL,
                      then https://waifuvault.moe/rest)
            timeout: Request timeout in seconds (ignored when http_client is given)
            verify_ssl: Whether to verify SSL certificates (default: True).
                        WARNING: Setting this to False is a security risk and should
                        only be used for local development with self-signed certificates.
            http_client: Preconfigured httpx client to send requests with. It is
                         not closed by this client.
        """
        self.base_url = (base_url or os.environ.get(BASE_URL_ENV) or DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout
        self.verify_ssl = verify_ssl

        if not verify_ssl:
            warnings.warn(
                "SSL verification is disabled. This is insecure and should only "
                "be used for local development with self-signed certificates.",
                UserWarning,
                stacklevel=2,
            )

        if http_client is None:
            self._client = httpx.Client(
                timeout=timeout,
                verify=verify_ssl,
                headers={"User-Agent": USER_AGENT},
                follow_redirects=True,
            )
            self._owns_client = True
        else:
            self._client = http_client
            self._owns_client = False

    def __repr__(self) -> str:
        return f"WaifuVaultClient(base_url={self.base_url!r}, timeout={self.timeout})"

    def close(self) -> None:
        """Close the HTTP client connection if this client created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "WaifuVaultClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    # ==================== Transport ====================

    def _send(self, request: PreparedRequest) -> httpx.Response:
        """
        Perform a prepared request.

        Raises:
            TransportError: If no response was received (timeout, connection failure)
        """
        kwargs: dict = {}
        if request.params:
            kwargs["params"] = request.params
        if request.headers:
            kwargs["headers"] = request.headers
        if request.json_body is not None:
            kwargs["json"] = request.json_body
        if request.data:
            kwargs["data"] = request.data
        if request.files:
            kwargs["files"] = request.files

        logger.debug("Sending %s %s", request.method, request.url)
        try:
            response = self._client.request(request.method, request.url, **kwargs)
        except httpx.TransportError as e:
            logger.debug("%s %s failed: %s", request.method, request.url, e)
            raise TransportError(f"{request.method} {request.url} failed: {e}") from e

        logger.debug("%s %s -> HTTP %d", request.method, request.url, response.status_code)
        return response

    def _raise_for_response(
        self, response: httpx.Response, fallback_message: Optional[str] = None
    ) -> None:
        """
        Raise the matching ApiError for a non-2xx response.

        The message comes from the server's ``{status, message, name}`` body;
        when the body is not such an envelope, ``fallback_message``, the raw
        text or ``HTTP <status>`` is used instead.
        """
        if response.is_success:
            return

        try:
            envelope = ErrorEnvelope.model_validate(response.json())
            message: str = envelope.message
            error_code = envelope.name
        except ValueError:
            # Not JSON, or JSON in another shape
            message = fallback_message or response.text or f"HTTP {response.status_code}"
            error_code = None

        retry_after = response.headers.get("retry-after")
        raise_for_status(
            response.status_code,
            message,
            error_code,
            int(retry_after) if retry_after and retry_after.isdigit() else None,
        )

    def _handle_response(self, response: httpx.Response, schema: Type[T]) -> T:
        """
        Decode a JSON response into ``schema``.

        Raises:
            ApiError: On a non-2xx status
            DecodeError: If a 2xx body is not JSON or does not match ``schema``
        """
        self._raise_for_response(response)

        try:
            data = response.json()
        except ValueError as e:
            raise DecodeError(
                f"Response is not valid JSON: {e}", response.status_code
            ) from e

        try:
            return TypeAdapter(schema).validate_python(data)
        except SchemaError as e:
            raise DecodeError(
                f"Unexpected response body for {getattr(schema, '__name__', schema)}: "
                f"{e.error_count()} validation error(s)",
                response.status_code,
            ) from e

    def _handle_binary(
        self, response: httpx.Response, fallback_message: Optional[str] = None
    ) -> bytes:
        self._raise_for_response(response, fallback_message)
        return response.content

    # ==================== Files ====================

    def upload(
        self,
        request: Optional[UploadRequest] = None,
        *,
        file: Optional[Union[str, Path]] = None,
        url: Optional[str] = None,
        data: Optional[bytes] = None,
        filename: Optional[str] = None,
        bucket: Optional[str] = None,
        expires: Optional[Union[str, Expiry]] = None,
        hide_filename: Optional[bool] = None,
        password: Optional[str] = None,
        one_time_download: Optional[bool] = None,
    ) -> FileInfo:
        """
        Upload content to WaifuVault.

        Either pass a ready UploadRequest, or exactly one of ``file``, ``url``
        or ``data`` (with ``filename``) plus options. A local file is read
        entirely into memory before anything is sent.

        Args:
            request: Complete upload request
            file: Path of a local file to upload
            url: URL the server should fetch the content from
            data: Raw bytes to upload
            filename: Name for raw bytes, or override for a local file's name
            bucket: Bucket token to upload into
            expires: Expiry such as "30m", "1h", "7d" (server retention policy if not provided)
            hide_filename: Hide the filename from the generated URL
            password: Password to encrypt the content with
            one_time_download: Delete the file after first access

        Returns:
            FileInfo with the file token and URL

        Raises:
            ValidationError: If zero or several sources are given, or an
                option has the wrong type
            IoError: If the local file cannot be read
            ApiError: If the server rejects the upload
        """
        if request is None:
            request = UploadRequest.from_sources(
                file=file,
                url=url,
                data=data,
                filename=filename,
                bucket=bucket,
                expires=expires,
                hide_filename=hide_filename,
                password=password,
                one_time_download=one_time_download,
            )
        elif any(
            value is not None
            for value in (
                file, url, data, filename, bucket, expires, hide_filename, password, one_time_download
            )
        ):
            raise ValidationError("Pass either an UploadRequest or upload keywords, not both")

        prepared = builders.build_upload_request(self.base_url, request)
        response = self._send(prepared)
        return self._handle_response(response, FileInfo)

    def file_info(
        self, request: Union[GetRequest, str], formatted: Optional[bool] = None
    ) -> FileInfo:
        """
        Get file metadata without downloading.

        Args:
            request: GetRequest, or a file token
            formatted: Report the retention period as readable text (token form only)

        Returns:
            FileInfo with file metadata
        """
        if not isinstance(request, GetRequest):
            request = build_model(
                GetRequest,
                token=request,
                formatted=False if formatted is None else formatted,
            )
        elif formatted is not None:
            raise ValidationError("Pass either a GetRequest or the formatted keyword, not both")

        response = self._send(builders.build_file_info_request(self.base_url, request))
        return self._handle_response(response, FileInfo)

    def update_file(
        self,
        request: Union[ModificationRequest, str],
        *,
        password: Optional[str] = None,
        previous_password: Optional[str] = None,
        custom_expiry: Optional[Union[str, Expiry]] = None,
        hide_filename: Optional[bool] = None,
    ) -> FileInfo:
        """
        Change the password, expiry or hide-filename flag of a stored file.

        Only the options that are given are changed. Changing the password of
        protected content also needs ``previous_password``; when it is missing
        or wrong the server's message is raised as an ApiError.

        Args:
            request: ModificationRequest, or a file token combined with the keywords
            password: New password
            previous_password: Current password of protected content
            custom_expiry: New expiry such as "10m"
            hide_filename: Whether to hide the filename

        Returns:
            FileInfo reflecting the new options
        """
        changes = {
            "password": password,
            "previous_password": previous_password,
            "custom_expiry": custom_expiry,
            "hide_filename": hide_filename,
        }
        if not isinstance(request, ModificationRequest):
            request = build_model(ModificationRequest, token=request, **changes)
        elif any(value is not None for value in changes.values()):
            raise ValidationError("Pass either a ModificationRequest or change keywords, not both")

        response = self._send(builders.build_modification_request(self.base_url, request))
        return self._handle_response(response, FileInfo)

    def delete_file(self, token: str) -> bool:
        """
        Delete a file by token.

        Returns:
            True if the server deleted the file
        """
        response = self._send(builders.build_delete_file_request(self.base_url, token))
        return self._handle_response(response, StrictBool)

    def download_file(self, url: str, password: Optional[str] = None) -> bytes:
        """
        Download the content of a file.

        Args:
            url: File URL as returned in FileInfo.url
            password: Password if the file is protected

        Returns:
            The file content

        Raises:
            PasswordRequiredError: If the password is missing or wrong
            NotFoundError: If the file does not exist or expired
        """
        prepared = builders.build_download_request(url, password)
        response = self._send(prepared)

        if password is None:
            fallback = "this file requires a password to download"
        else:
            fallback = "supplied password is incorrect"
        return self._handle_binary(
            response, fallback if response.status_code == 403 else None
        )

    # ==================== Buckets ====================

    def create_bucket(self) -> Bucket:
        """
        Create a new bucket.

        Keep the returned token: it is the only way to reach the bucket again.
        """
        response = self._send(builders.build_create_bucket_request(self.base_url))
        return self._handle_response(response, Bucket)

    def delete_bucket(self, token: str) -> bool:
        """Delete a bucket along with every file uploaded into it."""
        response = self._send(builders.build_delete_bucket_request(self.base_url, token))
        return self._handle_response(response, StrictBool)

    def get_bucket(self, token: str) -> Bucket:
        """Get a bucket with its files and albums."""
        response = self._send(builders.build_get_bucket_request(self.base_url, token))
        return self._handle_response(response, Bucket)

    # ==================== Albums ====================

    def create_album(self, bucket_token: str, name: str) -> Album:
        """
        Create an album inside a bucket.

        Args:
            bucket_token: Bucket the album belongs to
            name: Album name

        Returns:
            The new, empty Album
        """
        prepared = builders.build_create_album_request(self.base_url, bucket_token, name)
        return self._handle_response(self._send(prepared), Album)

    def associate_files(self, album_token: str, file_tokens: Iterable[str]) -> Album:
        """
        Add files to an album. The files must be in the album's bucket.

        Raises:
            ValidationError: If file_tokens is empty
        """
        prepared = builders.build_associate_request(self.base_url, album_token, file_tokens)
        return self._handle_response(self._send(prepared), Album)

    def disassociate_files(self, album_token: str, file_tokens: Iterable[str]) -> Album:
        """
        Remove files from an album without deleting them.

        Raises:
            ValidationError: If file_tokens is empty
        """
        prepared = builders.build_disassociate_request(self.base_url, album_token, file_tokens)
        return self._handle_response(self._send(prepared), Album)

    def delete_album(self, album_token: str, delete_files: bool = False) -> GenericResponse:
        """
        Delete an album.

        Args:
            album_token: Album to delete
            delete_files: Also delete the files associated with it
        """
        prepared = builders.build_delete_album_request(self.base_url, album_token, delete_files)
        return self._handle_response(self._send(prepared), GenericResponse)

    def get_album(self, album_token: str) -> Album:
        prepared = builders.build_get_album_request(self.base_url, album_token)
        return self._handle_response(self._send(prepared), Album)

    def share_album(self, album_token: str) -> str:
        """
        Make an album public.

        Returns:
            The public URL of the album
        """
        prepared = builders.build_share_album_request(self.base_url, album_token)
        return self._handle_response(self._send(prepared), GenericResponse).description

    def revoke_album(self, album_token: str) -> GenericResponse:
        """Make a public album private again; the old public URL stops working."""
        prepared = builders.build_revoke_album_request(self.base_url, album_token)
        return self._handle_response(self._send(prepared), GenericResponse)

    def download_album(
        self, album_token: str, file_ids: Optional[List[int]] = None
    ) -> bytes:
        """
        Download an album as a zip archive.

        Args:
            album_token: Album to download
            file_ids: Ids (FileInfo.id) of the files to include; all files if not provided

        Returns:
            The zip archive content
        """
        prepared = builders.build_download_album_request(self.base_url, album_token, file_ids)
        return self._handle_binary(self._send(prepared))
