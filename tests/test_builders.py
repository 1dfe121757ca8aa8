"""
Tests for request builders.
"""

import pytest

from waifuvault import builders
from waifuvault.exceptions import IoError, ValidationError
from waifuvault.models import (
    Expiry,
    ExpiryUnit,
    GetRequest,
    LocalFile,
    ModificationRequest,
    RawBytes,
    RemoteUrl,
    UploadRequest,
)

BASE_URL = "https://example.com/rest"


class TestUploadBuilder:
    """Test upload request construction."""

    @pytest.mark.parametrize(
        "source",
        [
            RemoteUrl(url="https://example.org/a.png"),
            RawBytes(data=b"abc", filename="a.bin"),
        ],
    )
    def test_single_source_is_valid(self, source):
        """Test that any single source produces a PUT."""
        prepared = builders.build_upload_request(BASE_URL, UploadRequest(source=source))
        assert prepared.method == "PUT"
        assert prepared.url == BASE_URL
        assert prepared.params == {}

    def test_local_file_is_read_into_memory(self, tmp_path):
        """Test that the transport receives bytes, not a file handle."""
        path = tmp_path / "notes.txt"
        path.write_bytes(b"line one\nline two\n")

        prepared = builders.build_upload_request(
            BASE_URL, UploadRequest(source=LocalFile(path=path))
        )
        assert prepared.files == {"file": ("notes.txt", b"line one\nline two\n")}
        assert prepared.data == {}

    def test_local_file_filename_override(self, tmp_path):
        """Test that a local file can be stored under another name."""
        path = tmp_path / "notes.txt"
        path.write_bytes(b"x")

        request = UploadRequest.from_sources(file=path, filename="renamed.txt")
        prepared = builders.build_upload_request(BASE_URL, request)
        assert prepared.files["file"][0] == "renamed.txt"

    def test_missing_source(self):
        """Test that an upload without a source is rejected."""
        with pytest.raises(ValidationError, match="Need either a file, url, or bytes"):
            builders.build_upload_request(BASE_URL, UploadRequest())

    def test_unreadable_file(self, tmp_path):
        """Test that read failures are IoError, not ValidationError."""
        with pytest.raises(IoError):
            builders.build_upload_request(
                BASE_URL, UploadRequest(source=LocalFile(path=tmp_path / "nope.bin"))
            )

    def test_directory_is_unreadable(self, tmp_path):
        """Test that a directory cannot be uploaded."""
        with pytest.raises(IoError):
            builders.build_upload_request(BASE_URL, UploadRequest(source=LocalFile(path=tmp_path)))

    def test_bytes_without_filename(self):
        """Test that raw bytes need a filename."""
        with pytest.raises(ValidationError, match="filename is required"):
            builders.build_upload_request(
                BASE_URL, UploadRequest(source=RawBytes(data=b"abc", filename=""))
            )

    def test_options_are_sent_only_when_set(self):
        """Test query parameters and body fields for every option."""
        request = UploadRequest(
            source=RemoteUrl(url="https://example.org/a.png"),
            bucket="bucket-1",
            expires=Expiry(amount=30, unit=ExpiryUnit.MINUTE),
            hide_filename=False,
            password="apple",
            one_time_download=True,
        )

        prepared = builders.build_upload_request(BASE_URL, request)
        assert prepared.url == f"{BASE_URL}/bucket-1"
        assert prepared.params == {
            "expires": "30m",
            "hide_filename": "false",
            "one_time_download": "true",
        }
        assert prepared.data == {"url": "https://example.org/a.png", "password": "apple"}
        assert prepared.files == {}

    def test_empty_bucket_token(self):
        """Test that an empty bucket token is rejected."""
        request = UploadRequest(source=RawBytes(data=b"a", filename="a"), bucket="")
        with pytest.raises(ValidationError, match="Bucket token cannot be empty"):
            builders.build_upload_request(BASE_URL, request)


class TestFromSources:
    """Test building upload requests from independent arguments."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"file": "a.txt", "url": "https://example.org/a.png"},
            {"file": "a.txt", "data": b"abc", "filename": "a.bin"},
            {"url": "https://example.org/a.png", "data": b"abc", "filename": "a.bin"},
            {"file": "a.txt", "url": "https://example.org/a", "data": b"abc"},
        ],
    )
    def test_several_sources(self, kwargs):
        """Test that more than one source is rejected."""
        with pytest.raises(ValidationError, match="Only one content source"):
            UploadRequest.from_sources(**kwargs)

    def test_no_source(self):
        """Test that no source is rejected."""
        with pytest.raises(ValidationError):
            UploadRequest.from_sources(password="apple")

    def test_bytes_need_filename(self):
        """Test that raw bytes without a filename are rejected."""
        with pytest.raises(ValidationError, match="filename is required"):
            UploadRequest.from_sources(data=b"abc")

    def test_empty_bytes_are_a_source(self):
        """Test that empty content still counts as a source."""
        request = UploadRequest.from_sources(data=b"", filename="empty.bin")
        assert isinstance(request.source, RawBytes)

    def test_options_carried(self):
        """Test that options pass through to the request."""
        request = UploadRequest.from_sources(
            url="https://example.org/a.png", expires="7d", one_time_download=True
        )
        assert isinstance(request.source, RemoteUrl)
        assert request.expires == Expiry(amount=7, unit=ExpiryUnit.DAY)
        assert request.one_time_download is True
        assert request.password is None


class TestModificationBuilder:
    """Test modification request construction."""

    @pytest.mark.parametrize(
        "changes,payload",
        [
            ({"password": "banana"}, {"password": "banana"}),
            ({"custom_expiry": "5m"}, {"customExpiry": "5m"}),
            ({"hide_filename": False}, {"hideFilename": False}),
            (
                {"password": "apple", "previous_password": "banana"},
                {"password": "apple", "previousPassword": "banana"},
            ),
            (
                {
                    "password": "apple",
                    "previous_password": "banana",
                    "custom_expiry": Expiry(amount=2, unit=ExpiryUnit.HOUR),
                    "hide_filename": True,
                },
                {
                    "password": "apple",
                    "previousPassword": "banana",
                    "customExpiry": "2h",
                    "hideFilename": True,
                },
            ),
        ],
    )
    def test_payload_holds_exactly_set_fields(self, changes, payload):
        """Test that the JSON body holds the set fields and nothing else."""
        prepared = builders.build_modification_request(
            BASE_URL, ModificationRequest(token="tok-123", **changes)
        )
        assert prepared.method == "PATCH"
        assert prepared.url == f"{BASE_URL}/tok-123"
        assert prepared.json_body == payload

    def test_previous_password_alone_is_sent(self):
        """Test that password pairing is left to the server."""
        prepared = builders.build_modification_request(
            BASE_URL, ModificationRequest(token="tok-123", previous_password="banana")
        )
        assert prepared.json_body == {"previousPassword": "banana"}

    def test_nothing_to_change(self):
        """Test that an empty modification is rejected."""
        with pytest.raises(ValidationError, match="at least one"):
            builders.build_modification_request(BASE_URL, ModificationRequest(token="tok-123"))

    def test_empty_token(self):
        """Test that an empty token is rejected."""
        with pytest.raises(ValidationError):
            builders.build_modification_request(
                BASE_URL, ModificationRequest(token="  ", password="apple")
            )


class TestOtherBuilders:
    """Test file, bucket and album request construction."""

    def test_file_info(self):
        """Test file info lookup."""
        prepared = builders.build_file_info_request(BASE_URL, GetRequest(token="tok-123"))
        assert prepared.url == f"{BASE_URL}/tok-123"
        assert prepared.params == {"formatted": "false"}

    def test_download_password_header(self):
        """Test that the password travels as a header."""
        prepared = builders.build_download_request("https://example.com/f/a.txt", "secret")
        assert prepared.headers == {"x-password": "secret"}
        assert prepared.params == {}

    def test_download_without_password(self):
        """Test that no header is sent without a password."""
        prepared = builders.build_download_request("https://example.com/f/a.txt")
        assert prepared.headers == {}

    def test_get_bucket(self):
        """Test that the bucket token travels in the body."""
        prepared = builders.build_get_bucket_request(BASE_URL, "bucket-1")
        assert prepared.method == "POST"
        assert prepared.url == f"{BASE_URL}/bucket/get"
        assert prepared.json_body == {"bucket_token": "bucket-1"}

    def test_create_album_needs_name(self):
        """Test that an album needs a name."""
        with pytest.raises(ValidationError, match="Album name"):
            builders.build_create_album_request(BASE_URL, "bucket-1", " ")

    @pytest.mark.parametrize(
        "build",
        [builders.build_associate_request, builders.build_disassociate_request],
    )
    def test_file_tokens_required(self, build):
        """Test that associate and disassociate need at least one token."""
        with pytest.raises(ValidationError):
            build(BASE_URL, "album-1", [])
        with pytest.raises(ValidationError):
            build(BASE_URL, "album-1", ["tok-1", ""])
        with pytest.raises(ValidationError):
            build(BASE_URL, "album-1", "tok-1")

    def test_associate_accepts_any_iterable(self):
        """Test that a set of tokens is accepted."""
        prepared = builders.build_associate_request(BASE_URL, "album-1", {"tok-1"})
        assert prepared.json_body == {"fileTokens": ["tok-1"]}

    def test_download_album_defaults_to_whole_album(self):
        """Test that no ids means an empty id list."""
        prepared = builders.build_download_album_request(BASE_URL, "album-1")
        assert prepared.url == f"{BASE_URL}/album/download/album-1"
        assert prepared.json_body == []

    @pytest.mark.parametrize(
        "build",
        [
            builders.build_delete_file_request,
            builders.build_delete_bucket_request,
            builders.build_get_bucket_request,
            builders.build_get_album_request,
            builders.build_share_album_request,
            builders.build_revoke_album_request,
            builders.build_delete_album_request,
            builders.build_download_album_request,
        ],
    )
    def test_empty_tokens_rejected(self, build):
        """Test that every token-taking builder rejects an empty token."""
        with pytest.raises(ValidationError, match="cannot be empty"):
            build(BASE_URL, "")

    @pytest.mark.parametrize(
        "token",
        ["x/../bucket/victim-bucket", "abc#def", "abc?formatted=true", "..", "a b", "tok/"],
    )
    def test_tokens_must_be_single_path_segment(self, token):
        """Test that tokens able to change the request path are rejected."""
        for build in (
            builders.build_delete_file_request,
            builders.build_delete_bucket_request,
            builders.build_get_album_request,
            builders.build_delete_album_request,
        ):
            with pytest.raises(ValidationError, match="Must contain only alphanumeric"):
                build(BASE_URL, token)
        with pytest.raises(ValidationError):
            builders.build_file_info_request(BASE_URL, GetRequest(token=token))
        with pytest.raises(ValidationError):
            builders.build_modification_request(
                BASE_URL, ModificationRequest(token=token, password="apple")
            )
        with pytest.raises(ValidationError):
            builders.build_associate_request(BASE_URL, "album-1", ["tok-1", token])
        with pytest.raises(ValidationError):
            builders.build_upload_request(
                BASE_URL, UploadRequest(source=RawBytes(data=b"a", filename="a"), bucket=token)
            )

    def test_uuid_tokens_accepted(self):
        """Test that server-issued UUID tokens pass validation."""
        token = "0b3bd2a5-8f0e-4a57-9c0e-5d7a0f7d3a11"
        prepared = builders.build_delete_file_request(BASE_URL, token)
        assert prepared.url == f"{BASE_URL}/{token}"
