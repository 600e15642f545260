import logging

from fastapi import UploadFile

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024  # 1MB
MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB

IMAGE_CONTENT_TYPES = frozenset({
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/jpg",
})

UPLOAD_CONTENT_TYPES = IMAGE_CONTENT_TYPES | {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
}

# updates only accept images
UPDATE_CONTENT_TYPES = IMAGE_CONTENT_TYPES

NO_FILE_MESSAGE = "No file selected."
TOO_LARGE_MESSAGE = "File size exceeds the maximum allowed limit of 10MB."


class FileValidationError(ValueError):
    """Client-side problem with an uploaded file (maps to HTTP 400)."""


def _invalid_type_message(allowed_types: frozenset[str]) -> str:
    if allowed_types == IMAGE_CONTENT_TYPES:
        return "Invalid file type. Only JPEG, PNG, and GIF images are allowed."
    return "Invalid file type. Only JPEG, PNG, GIF images and PDF, DOC, DOCX documents are allowed."


def check_upload(file: UploadFile | None, allowed_types: frozenset[str]) -> UploadFile:
    """Reject a missing, empty, oversized or disallowed upload.

    The declared content type is trusted as sent by the client; the bytes
    are not sniffed. Size is checked against the length Starlette recorded
    for the part; when that is unknown, `read_upload` enforces the limit.
    """
    if file is None or file.size == 0:
        logger.warning("File not selected.")
        raise FileValidationError(NO_FILE_MESSAGE)

    if file.size is not None and file.size > MAX_FILE_SIZE:
        logger.warning("File size exceeds the limit: %s bytes.", file.size)
        raise FileValidationError(TOO_LARGE_MESSAGE)

    if file.content_type not in allowed_types:
        logger.warning("Invalid file type: %s", file.content_type)
        raise FileValidationError(_invalid_type_message(allowed_types))

    return file


async def read_upload(upload_file: UploadFile, limit: int = MAX_FILE_SIZE) -> bytes:
    """Buffer the whole upload into memory."""
    buf = bytearray()

    try:
        while True:
            chunk = await upload_file.read(CHUNK_SIZE)
            if not chunk:
                break
            buf.extend(chunk)
            if len(buf) > limit:
                logger.warning("File size exceeds the limit while reading: %s bytes.", len(buf))
                raise FileValidationError(TOO_LARGE_MESSAGE)
    finally:
        await upload_file.close()

    if not buf:
        logger.warning("File not selected.")
        raise FileValidationError(NO_FILE_MESSAGE)

    return bytes(buf)
