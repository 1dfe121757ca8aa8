"""
WaifuVault SDK Data Models

Pydantic models for WaifuVault API requests and responses.
"""

import re
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Dict, List, Literal, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as SchemaError

from waifuvault.exceptions import ValidationError


EXPIRY_PATTERN = re.compile(r"^\s*(\d+)\s*([mhd])\s*$")

M = TypeVar("M", bound=BaseModel)


def build_model(model: Type[M], **values: Any) -> M:
    """
    Construct a request model from caller input.

    Raises:
        ValidationError: If a value has the wrong type or is out of range
    """
    try:
        return model(**values)
    except SchemaError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in e.errors()
        )
        raise ValidationError(f"Invalid {model.__name__}: {problems}") from e


class ExpiryUnit(str, Enum):
    """Unit of an expiry specification, as the single letter the server expects."""

    MINUTE = "m"
    HOUR = "h"
    DAY = "d"


class Expiry(BaseModel):
    """When uploaded content is removed: an amount of minutes, hours or days."""

    model_config = ConfigDict(frozen=True)

    amount: int = Field(gt=0, description="Number of units until expiry")
    unit: ExpiryUnit = Field(default=ExpiryUnit.HOUR, description="Unit of the amount")

    def __str__(self) -> str:
        return f"{self.amount}{self.unit.value}"

    @classmethod
    def parse(cls, value: str) -> "Expiry":
        """Parse the server's compact form, e.g. ``"30m"``, ``"1h"`` or ``"7d"``."""
        match = EXPIRY_PATTERN.match(value)
        if not match or int(match.group(1)) == 0:
            raise ValidationError(
                f"Invalid expiry {value!r}. Must be a positive number followed by m, h or d."
            )
        return cls(amount=int(match.group(1)), unit=ExpiryUnit(match.group(2)))


# ==================== Requests ====================


class LocalFile(BaseModel):
    """Upload content read from a file on disk."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["file"] = "file"
    path: Path
    filename: Optional[str] = Field(
        default=None, description="Override filename (uses the path's name if not provided)"
    )

    @property
    def upload_name(self) -> str:
        return self.filename or self.path.name


class RemoteUrl(BaseModel):
    """Upload content fetched by the server from a URL."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["url"] = "url"
    url: str


class RawBytes(BaseModel):
    """Upload in-memory content under an explicit filename."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["bytes"] = "bytes"
    data: bytes
    filename: str


ContentSource = Annotated[Union[LocalFile, RemoteUrl, RawBytes], Field(discriminator="kind")]


class UploadRequest(BaseModel):
    """
    Content to upload and the options to store it with.

    Every optional field left as ``None`` is omitted from the request, so the
    server applies its own default.
    """

    model_config = ConfigDict(frozen=True)

    source: Optional[ContentSource] = Field(default=None, description="What to upload")
    bucket: Optional[str] = Field(default=None, description="Bucket token to upload into")
    expires: Optional[Expiry] = Field(
        default=None, description="Expiry (uses the server retention policy if not provided)"
    )
    hide_filename: Optional[bool] = Field(
        default=None, description="Hide the filename from the generated URL"
    )
    password: Optional[str] = Field(
        default=None, description="Password to encrypt the content with on the server"
    )
    one_time_download: Optional[bool] = Field(
        default=None, description="Delete the file after first access"
    )

    @field_validator("expires", mode="before")
    @classmethod
    def _parse_expiry(cls, value: Any) -> Any:
        if isinstance(value, str):
            return Expiry.parse(value)
        return value

    @classmethod
    def from_sources(
        cls,
        file: Optional[Union[str, Path]] = None,
        url: Optional[str] = None,
        data: Optional[bytes] = None,
        filename: Optional[str] = None,
        **options: Any,
    ) -> "UploadRequest":
        """
        Build a request from independent source arguments.

        Exactly one of ``file``, ``url`` or ``data`` must be given; ``data``
        also needs a ``filename``. A ``filename`` overrides a local file's
        name and is refused for ``url``, since the server names fetched files.

        Raises:
            ValidationError: If zero or several sources are given, or any
                value is invalid
        """
        given = [
            name for name, value in (("file", file), ("url", url), ("data", data)) if value is not None
        ]
        if not given:
            raise ValidationError("Need either a file, url, or bytes to upload")
        if len(given) > 1:
            raise ValidationError(
                f"Only one content source may be set, got: {', '.join(given)}"
            )

        source: Union[LocalFile, RemoteUrl, RawBytes]
        if file is not None:
            source = build_model(LocalFile, path=file, filename=filename)
        elif url is not None:
            if filename is not None:
                raise ValidationError(
                    "A filename cannot be given for URL uploads; the server names the file"
                )
            source = build_model(RemoteUrl, url=url)
        else:
            if not filename:
                raise ValidationError("A filename is required when uploading raw bytes")
            source = build_model(RawBytes, data=data, filename=filename)

        return build_model(cls, source=source, **options)


class ModificationRequest(BaseModel):
    """
    Changes to apply to a stored file.

    Only the fields that are set are sent: the server treats a present field
    as "change this" and an absent one as "leave unchanged". Changing the
    password of already protected content also needs ``previous_password``;
    the server checks that, not the client.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    token: str
    password: Optional[str] = None
    previous_password: Optional[str] = Field(default=None, alias="previousPassword")
    custom_expiry: Optional[str] = Field(default=None, alias="customExpiry")
    hide_filename: Optional[bool] = Field(default=None, alias="hideFilename")

    @field_validator("custom_expiry", mode="before")
    @classmethod
    def _expiry_to_str(cls, value: Any) -> Any:
        if isinstance(value, Expiry):
            return str(value)
        return value

    def to_payload(self) -> Dict[str, Any]:
        """JSON body for the PATCH call, holding exactly the fields that were set."""
        return self.model_dump(by_alias=True, exclude_none=True, exclude={"token"})


class GetRequest(BaseModel):
    """File information lookup."""

    model_config = ConfigDict(frozen=True)

    token: str
    formatted: bool = Field(
        default=False, description="Report the retention period in human readable form"
    )


# ==================== Responses ====================


class FileOptions(BaseModel):
    """Options stored with an uploaded file."""

    model_config = ConfigDict(populate_by_name=True)

    hide_filename: bool = Field(alias="hideFilename")
    one_time_download: bool = Field(alias="oneTimeDownload")
    protected: bool


class AlbumMetadata(BaseModel):
    """Album a file belongs to, as embedded in file and bucket entries."""

    model_config = ConfigDict(populate_by_name=True)

    token: str
    public_token: Optional[str] = Field(default=None, alias="publicToken")
    name: str
    bucket: str
    date_created: datetime = Field(alias="dateCreated")


class FileInfo(BaseModel):
    """Stored file metadata."""

    model_config = ConfigDict(populate_by_name=True)

    token: str = Field(description="File token - used for file info, updates and deleting")
    url: str = Field(description="Location of the uploaded file")
    id: Optional[int] = Field(default=None, description="Numeric id, used for album downloads")
    bucket: Optional[str] = None
    album: Optional[AlbumMetadata] = None
    views: int = 0
    retention_period: Union[int, str] = Field(
        alias="retentionPeriod",
        description="Milliseconds until expiry, or a readable string when formatted",
    )
    options: Optional[FileOptions] = None


class Bucket(BaseModel):
    """Bucket and everything uploaded into it."""

    token: str
    files: List[FileInfo] = Field(default_factory=list)
    albums: List[AlbumMetadata] = Field(default_factory=list)

    @field_validator("albums", mode="before")
    @classmethod
    def _null_albums(cls, value: Any) -> Any:
        # Buckets without albums may report null
        return [] if value is None else value


class Album(BaseModel):
    """Named collection of files within a bucket."""

    model_config = ConfigDict(populate_by_name=True)

    token: str
    bucket_token: str = Field(alias="bucketToken")
    public_token: Optional[str] = Field(default=None, alias="publicToken")
    name: str
    files: List[FileInfo] = Field(default_factory=list)

    @property
    def is_public(self) -> bool:
        return self.public_token is not None


class GenericResponse(BaseModel):
    """Success flag plus a description from the server."""

    success: bool
    description: str


class ErrorEnvelope(BaseModel):
    """Shape of every error body returned by the server."""

    status: int
    message: str
    name: Optional[str] = None
