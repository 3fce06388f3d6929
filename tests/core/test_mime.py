import pytest

from core.models.errors import MIMETypeError
from core.models.media import NormalizedFile, SourceFile
from core.utils.mime import (
    detect_mime_type,
    file_extension,
    normalize,
    resolve_content_type,
)


def _source(file_name: str, content_type: str | None, data: bytes = b"bytes") -> SourceFile:
    return SourceFile(data=data, file_name=file_name, content_type=content_type)


def test_detect_jpeg() -> None:
    assert detect_mime_type(b"\xff\xd8\xff\xe0abc") == "image/jpeg"


def test_detect_png() -> None:
    assert detect_mime_type(b"\x89PNG\r\n\x1a\nxxx") == "image/png"


def test_detect_webp_requires_webp_fourcc() -> None:
    assert detect_mime_type(b"RIFF\x00\x00\x00\x00WEBPVP8 ") == "image/webp"

    with pytest.raises(ValueError):
        detect_mime_type(b"RIFF\x00\x00\x00\x00WAVEfmt ")


def test_unsupported_type() -> None:
    with pytest.raises(ValueError):
        detect_mime_type(b"random-bytes")


@pytest.mark.parametrize(
    "file_name,expected",
    [
        ("photo.PNG", "png"),
        ("archive.tar.gz", "gz"),
        ("noextension", None),
        ("trailingdot.", None),
        ("a.png/../x", None),
        ("photo.j pg", None),
        ("photo.png?v=1", None),
    ],
)
def test_file_extension(file_name: str, expected: str | None) -> None:
    assert file_extension(file_name) == expected


class TestResolveContentType:
    def test_json_claim_with_png_name_resolves_to_png(self) -> None:
        assert resolve_content_type(_source("photo.png", "application/json")) == "image/png"

    @pytest.mark.parametrize(
        "file_name,expected",
        [
            ("a.jpg", "image/jpeg"),
            ("a.jpeg", "image/jpeg"),
            ("a.png", "image/png"),
            ("a.gif", "image/gif"),
            ("a.webp", "image/webp"),
            ("a.bmp", "image/jpeg"),
            ("a", "image/jpeg"),
        ],
    )
    def test_generic_claim_inferred_from_extension(self, file_name: str, expected: str) -> None:
        assert resolve_content_type(_source(file_name, "application/octet-stream")) == expected

    def test_missing_claim_inferred_from_extension(self) -> None:
        assert resolve_content_type(_source("avatar.webp", None)) == "image/webp"
        assert resolve_content_type(_source("avatar.gif", "")) == "image/gif"

    def test_specific_raster_claim_passes_through(self) -> None:
        # Claimed type wins over the extension when it is a real image type
        assert resolve_content_type(_source("avatar.jpg", "image/png")) == "image/png"


class TestNormalize:
    def test_returns_new_value_with_resolved_type(self) -> None:
        source = _source("photo.png", "application/octet-stream")

        normalized = normalize(source)

        assert isinstance(normalized, NormalizedFile)
        assert normalized is not source
        assert normalized.content_type == "image/png"
        assert normalized.data == source.data
        assert normalized.file_name == "photo.png"
        assert source.content_type == "application/octet-stream"

    def test_lenient_mode_accepts_non_image_bytes(self) -> None:
        normalized = normalize(_source("notes.txt", "text/plain", b"hello"))
        assert normalized.content_type == "image/jpeg"

    def test_strict_mode_accepts_matching_content(self, small_png_bytes: bytes) -> None:
        normalized = normalize(_source("me.png", None, small_png_bytes), strict=True)
        assert normalized.content_type == "image/png"

    def test_strict_mode_rejects_unknown_content(self) -> None:
        with pytest.raises(MIMETypeError):
            normalize(_source("notes.jpg", None, b"hello"), strict=True)

    def test_strict_mode_rejects_mismatched_content(self, small_png_bytes: bytes) -> None:
        with pytest.raises(MIMETypeError) as exc:
            normalize(_source("me.jpg", "image/jpeg", small_png_bytes), strict=True)

        assert exc.value.details["detected"] == "image/png"
