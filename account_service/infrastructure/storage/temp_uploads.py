"""
Temp-file staging for multipart uploads.

Incoming files are written under the configured temp directory with a random
name so the media uploader can read them from a local path.
"""

import logging
import uuid
from pathlib import Path
from typing import Iterable, Optional

from fastapi import UploadFile

from ...core.exceptions import PayloadTooLargeError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def _upload_dir(base_dir: str) -> Path:
    upload_dir = Path(base_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    return upload_dir


async def save_upload_to_temp(
    file: Optional[UploadFile],
    base_dir: str,
    max_mb: int,
) -> Optional[str]:
    """
    Stream an UploadFile to a temp path.

    Returns:
        Absolute path of the stored file, or None when no file was sent
    """
    if file is None or not file.filename:
        return None

    ext = Path(file.filename).suffix.lower()
    final_path = (_upload_dir(base_dir) / f"{uuid.uuid4().hex}{ext}").resolve()
    max_bytes = max_mb * 1024 * 1024

    size = 0
    with open(final_path, "wb") as f:
        while True:
            chunk = await file.read(CHUNK_SIZE)
            if not chunk:
                break
            size += len(chunk)
            if size > max_bytes:
                f.close()
                final_path.unlink(missing_ok=True)
                raise PayloadTooLargeError(f"File too large. Max {max_mb} MB.")
            f.write(chunk)

    if size == 0:
        final_path.unlink(missing_ok=True)
        return None
    return str(final_path)


def remove_temp_files(paths: Iterable[Optional[str]]) -> None:
    """Delete staged files that are still on disk."""
    for path in paths:
        if not path:
            continue
        try:
            Path(path).unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove temp file {path}: {e}")
