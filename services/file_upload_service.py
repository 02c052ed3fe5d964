import logging
import os
import uuid
from typing import Tuple

from fastapi import UploadFile

from config import ALLOWED_EXTENSIONS, MAX_UPLOAD_SIZE, UPLOAD_DIR

logger = logging.getLogger(__name__)


class UploadRejected(Exception):
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def save_uploaded_file(file: UploadFile) -> Tuple[str, str, int]:
    """
    Save the uploaded Excel file under a unique name in UPLOAD_DIR.
    Returns (stored filename, file path, size in bytes).
    """
    ext = os.path.splitext(file.filename or "")[1]
    if ext.lower() not in ALLOWED_EXTENSIONS:
        raise UploadRejected("Only Excel files (.xlsx, .xls) are allowed")

    content = file.file.read(MAX_UPLOAD_SIZE + 1)
    if len(content) > MAX_UPLOAD_SIZE:
        raise UploadRejected(
            f"File too large. Maximum size is {MAX_UPLOAD_SIZE // (1024 * 1024)}MB.",
            status_code=413,
        )
    if not content:
        raise UploadRejected("No file uploaded")

    unique_name = f"{uuid.uuid4().hex}{ext.lower()}"
    file_path = os.path.join(UPLOAD_DIR, unique_name)

    with open(file_path, "wb") as f:
        f.write(content)

    logger.info(f"Stored upload {file.filename} as {unique_name} ({len(content)} bytes)")
    return unique_name, file_path, len(content)


def remove_stored_file(file_path: str) -> None:
    if file_path and os.path.exists(file_path):
        os.remove(file_path)
        logger.info(f"Removed stored file {file_path}")
