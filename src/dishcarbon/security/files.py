"""Validation of uploaded image files before vision analysis."""

from __future__ import annotations

import logging
from typing import Any

from dishcarbon.core.models import (
    Accepted,
    Rejected,
    RejectionCode,
    UploadedFile,
    ValidationOutcome,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024
MAX_FILENAME_LENGTH = 255
MIN_IMAGE_BYTES = 100

ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/webp")

# Leading bytes expected for each declared type.
IMAGE_SIGNATURES: dict[str, bytes] = {
    "image/jpeg": b"\xff\xd8\xff",
    "image/jpg": b"\xff\xd8\xff",
    "image/png": b"\x89PNG",
    "image/webp": b"RIFF",
}

BLOCKED_EXTENSIONS = (
    ".exe",
    ".bat",
    ".cmd",
    ".scr",
    ".pif",
    ".com",
    ".jar",
    ".php",
    ".jsp",
    ".asp",
    ".js",
    ".vbs",
    ".sh",
    ".py",
)


def has_blocked_extension(filename: str) -> bool:
    return filename.lower().endswith(BLOCKED_EXTENSIONS)


def signature_matches(buffer: bytes, mimetype: str) -> bool:
    """True when the buffer starts with the magic number of the declared type."""
    signature = IMAGE_SIGNATURES.get(mimetype)
    return signature is not None and bytes(buffer[: len(signature)]) == signature


class FileSecurityValidator:
    """
    Layered checks for uploaded images.

    The signature check compares the leading bytes against the declared MIME
    type, so a renamed payload with an image extension and MIME claim is
    still rejected.
    """

    def __init__(self, max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE_BYTES) -> None:
        self.max_file_size_bytes = max_file_size_bytes

    def validate(self, file: UploadedFile | None) -> ValidationOutcome[None]:
        if file is None:
            return self._reject(RejectionCode.MISSING_FILE, "No image file provided")

        if file.mimetype not in ALLOWED_IMAGE_TYPES:
            return self._reject(
                RejectionCode.INVALID_MIME_TYPE,
                f"Invalid file type. Allowed types: {', '.join(ALLOWED_IMAGE_TYPES)}",
                mimetype=file.mimetype,
                filename=file.originalname,
            )

        if file.size > self.max_file_size_bytes:
            max_mb = round(self.max_file_size_bytes / (1024 * 1024), 2)
            return self._reject(
                RejectionCode.FILE_TOO_LARGE,
                f"File size exceeds maximum allowed size of {max_mb:g}MB",
                size=file.size,
                max_size=self.max_file_size_bytes,
            )

        buffer = file.buffer or b""
        if len(buffer) == 0:
            return self._reject(RejectionCode.EMPTY_FILE, "Uploaded file is empty or corrupted")

        if file.originalname:
            if len(file.originalname) > MAX_FILENAME_LENGTH:
                return self._reject(
                    RejectionCode.FILENAME_TOO_LONG,
                    "Filename is too long",
                    filename_length=len(file.originalname),
                )
            if has_blocked_extension(file.originalname):
                return self._reject(
                    RejectionCode.BLOCKED_EXTENSION,
                    "Invalid file extension",
                    filename=file.originalname,
                )

        if len(buffer) < MIN_IMAGE_BYTES:
            return self._reject(
                RejectionCode.FILE_TOO_SMALL,
                "File is too small to be a valid image",
                size=len(buffer),
            )

        if not signature_matches(buffer, file.mimetype):
            return self._reject(
                RejectionCode.HEADER_MISMATCH,
                "File header does not match declared image type",
                mimetype=file.mimetype,
                header=bytes(buffer[:4]).hex(),
            )

        return Accepted(None)

    def _reject(self, code: RejectionCode, message: str, **context: Any) -> Rejected:
        logger.warning("Image validation failed code=%s %s", code.value, context)
        return Rejected(code=code, message=message, field="image")
