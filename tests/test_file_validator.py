"""Tests for uploaded image validation."""

import pytest

from dishcarbon.core.models import Accepted, Rejected, RejectionCode, UploadedFile
from dishcarbon.security.files import FileSecurityValidator, signature_matches

JPEG = b"\xff\xd8\xff\xe0" + bytes(1000)
PNG = b"\x89PNG\r\n\x1a\n" + bytes(500)
WEBP = b"RIFF" + bytes(4) + b"WEBP" + bytes(500)


def _upload(
    buffer: bytes,
    mimetype: str = "image/jpeg",
    name: str | None = "test.jpg",
    size: int | None = None,
) -> UploadedFile:
    return UploadedFile(
        buffer=buffer,
        mimetype=mimetype,
        size=len(buffer) if size is None else size,
        originalname=name,
    )


def _code(
    file: UploadedFile | None, validator: FileSecurityValidator | None = None
) -> RejectionCode:
    outcome = (validator or FileSecurityValidator()).validate(file)
    assert isinstance(outcome, Rejected), outcome
    return outcome.code


@pytest.mark.parametrize(
    "buffer,mimetype,name",
    [
        (JPEG, "image/jpeg", "test.jpg"),
        (JPEG, "image/jpg", "photo.JPG"),
        (PNG, "image/png", "plate.png"),
        (WEBP, "image/webp", "plate.webp"),
        (JPEG, "image/jpeg", None),
    ],
)
def test_valid_images_accepted(buffer: bytes, mimetype: str, name: str | None) -> None:
    outcome = FileSecurityValidator().validate(_upload(buffer, mimetype, name))
    assert isinstance(outcome, Accepted)
    assert outcome.value is None


def test_missing_file_rejected() -> None:
    assert _code(None) == RejectionCode.MISSING_FILE


def test_invalid_mime_type_rejected() -> None:
    file = _upload(bytes(200), "application/pdf", "test.pdf")
    assert _code(file) == RejectionCode.INVALID_MIME_TYPE


def test_oversized_file_rejected() -> None:
    file = _upload(JPEG, size=50 * 1024 * 1024, name="huge.jpg")
    assert _code(file) == RejectionCode.FILE_TOO_LARGE


def test_configured_size_limit() -> None:
    validator = FileSecurityValidator(max_file_size_bytes=500)
    assert _code(_upload(JPEG), validator) == RejectionCode.FILE_TOO_LARGE
    assert isinstance(FileSecurityValidator(2000).validate(_upload(JPEG)), Accepted)


def test_empty_buffer_rejected() -> None:
    assert _code(_upload(b"", size=10)) == RejectionCode.EMPTY_FILE


def test_long_filename_rejected() -> None:
    assert _code(_upload(JPEG, name="a" * 252 + ".jpg")) == RejectionCode.FILENAME_TOO_LONG


@pytest.mark.parametrize(
    "name", ["malware.exe", "script.js", "hack.php", "virus.bat", "malware.jpg.exe", "RUN.SH"]
)
def test_blocked_extensions_rejected(name: str) -> None:
    assert _code(_upload(JPEG, name=name)) == RejectionCode.BLOCKED_EXTENSION


def test_blocked_extension_despite_valid_signature() -> None:
    outcome = FileSecurityValidator().validate(_upload(JPEG, name="malware.jpg.exe"))
    assert isinstance(outcome, Rejected)
    assert outcome.code == RejectionCode.BLOCKED_EXTENSION


def test_tiny_file_rejected() -> None:
    assert _code(_upload(b"\xff\xd8\xff" + bytes(50))) == RejectionCode.FILE_TOO_SMALL


def test_header_mismatch_rejected() -> None:
    buffer = bytes(204)
    outcome = FileSecurityValidator().validate(
        UploadedFile(buffer=buffer, mimetype="image/jpeg", size=204)
    )
    assert isinstance(outcome, Rejected)
    assert outcome.code == RejectionCode.HEADER_MISMATCH
    assert "header" in outcome.message


@pytest.mark.parametrize(
    "buffer,mimetype",
    [(PNG, "image/jpeg"), (JPEG, "image/png"), (JPEG, "image/webp"), (WEBP, "image/png")],
)
def test_declared_type_must_match_signature(buffer: bytes, mimetype: str) -> None:
    assert _code(_upload(buffer, mimetype, "photo.img")) == RejectionCode.HEADER_MISMATCH


def test_signature_helper() -> None:
    assert signature_matches(JPEG, "image/jpeg")
    assert not signature_matches(JPEG, "image/gif")
    assert not signature_matches(b"\xff", "image/jpeg")
