"""
Tests for WaifuVault data models.
"""

import pytest

from waifuvault.exceptions import ValidationError
from waifuvault.models import (
    Album,
    Bucket,
    Expiry,
    ExpiryUnit,
    FileInfo,
    ModificationRequest,
    UploadRequest,
)


class TestExpiry:
    """Test expiry specifications."""

    @pytest.mark.parametrize(
        "text,amount,unit",
        [
            ("30m", 30, ExpiryUnit.MINUTE),
            ("1h", 1, ExpiryUnit.HOUR),
            ("7d", 7, ExpiryUnit.DAY),
        ],
    )
    def test_parse(self, text, amount, unit):
        """Test parsing the compact form."""
        expiry = Expiry.parse(text)
        assert expiry.amount == amount
        assert expiry.unit is unit
        assert str(expiry) == text

    @pytest.mark.parametrize("text", ["", "h", "10", "10w", "0h", "-1d", "1.5h"])
    def test_parse_invalid(self, text):
        """Test that malformed expiries are rejected."""
        with pytest.raises(ValidationError, match="Invalid expiry"):
            Expiry.parse(text)

    def test_upload_request_parses_string(self):
        """Test that upload requests accept the compact form."""
        request = UploadRequest(expires="12h")
        assert request.expires == Expiry(amount=12, unit=ExpiryUnit.HOUR)


class TestModificationRequest:
    """Test modification payloads."""

    def test_payload_excludes_token_and_unset_fields(self):
        """Test that only set fields appear, under the server's names."""
        request = ModificationRequest(token="tok-123", custom_expiry="5m")
        assert request.to_payload() == {"customExpiry": "5m"}

    def test_false_is_a_set_value(self):
        """Test that False is sent rather than dropped."""
        request = ModificationRequest(token="tok-123", hide_filename=False)
        assert request.to_payload() == {"hideFilename": False}

    def test_accepts_server_names(self):
        """Test construction from camelCase keys."""
        request = ModificationRequest.model_validate(
            {"token": "tok-123", "previousPassword": "banana"}
        )
        assert request.previous_password == "banana"


class TestResponseModels:
    """Test decoding of server responses."""

    def test_file_info_with_album(self):
        """Test a file entry that belongs to an album."""
        info = FileInfo.model_validate(
            {
                "token": "tok-123",
                "url": "https://example.com/f/1/a.txt",
                "bucket": "bucket-1",
                "views": 3,
                "retentionPeriod": 1000,
                "album": {
                    "token": "album-1",
                    "publicToken": "pub-1",
                    "name": "holiday",
                    "bucket": "bucket-1",
                    "dateCreated": 1700000000000,
                },
                "options": {"hideFilename": True, "oneTimeDownload": False, "protected": True},
            }
        )
        assert info.album.public_token == "pub-1"
        assert info.options.hide_filename is True
        assert info.views == 3

    def test_public_album(self):
        """Test the public flag of an album."""
        album = Album.model_validate(
            {"token": "album-1", "bucketToken": "bucket-1", "publicToken": "pub-1", "name": "x"}
        )
        assert album.is_public is True
        assert album.files == []


class TestUploadRequestInput:
    """Test that bad caller input is reported as ValidationError."""

    def test_url_with_filename(self):
        """Test that a filename is refused for URL uploads."""
        with pytest.raises(ValidationError, match="filename cannot be given"):
            UploadRequest.from_sources(url="https://example.org/a.png", filename="b.png")

    @pytest.mark.parametrize(
        "options",
        [{"hide_filename": "maybe"}, {"expires": {"amount": 0}}, {"one_time_download": []}],
    )
    def test_bad_option_values(self, options):
        """Test that wrongly typed options raise the SDK's ValidationError."""
        with pytest.raises(ValidationError, match="Invalid UploadRequest") as exc_info:
            UploadRequest.from_sources(data=b"x", filename="a.bin", **options)
        assert exc_info.value.__cause__ is not None

    def test_bad_expiry_string(self):
        """Test that a malformed expiry string keeps its own message."""
        with pytest.raises(ValidationError, match="Invalid expiry"):
            UploadRequest.from_sources(data=b"x", filename="a.bin", expires="soon")


class TestBucketModel:
    """Test bucket decoding."""

    @pytest.mark.parametrize("albums", [None, []])
    def test_albums_default_to_empty_list(self, albums):
        """Test that a null or empty album list decodes to []."""
        bucket = Bucket.model_validate({"token": "bucket-1", "files": [], "albums": albums})
        assert bucket.albums == []

    def test_albums_missing(self):
        """Test that a bucket without an albums key decodes to []."""
        assert Bucket.model_validate({"token": "bucket-1"}).albums == []
