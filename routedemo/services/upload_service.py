"""
RouteDemo: Upload Storage Service
=================================

What:  Pulls the uploaded file out of a multipart form, checks that its name is
       safe to use as a storage key, and writes it into the upload directory.
How:   Streams the upload in chunks to a hidden temporary file next to the
       destination, then publishes it with an atomic rename.
Who:   Called by the POST /upload route handler.

Storage Model:
    upload_dir/
    ├── a.txt                       ← published uploads, stored under the client filename
    └── .upload-<uuid>.part         ← in-flight write, renamed over a.txt when complete

    Concurrent uploads with the same filename each write their own temporary
    file; the destination always holds one complete upload and the last
    rename wins.

Filename Rules (ValidationError otherwise):
    - present and non-empty
    - not "." or ".."
    - no "/" or "\\" separators, no NUL or other control characters
    - at most 255 bytes when UTF-8 encoded
"""

import logging
import uuid
from pathlib import Path
from typing import Optional, Tuple

import aiofiles
import aiofiles.os
from starlette.datastructures import FormData, UploadFile

from routedemo.config import settings
from routedemo.exceptions import FileStorageError, PayloadTooLargeError, ValidationError

logger = logging.getLogger(__name__)

# Multipart field carrying the uploaded file
UPLOAD_FIELD = "file"

MAX_FILENAME_BYTES = 255


def extract_upload(form: FormData, field: str = UPLOAD_FIELD) -> UploadFile:
    """
    Return the single uploaded file in `field`, or raise the reason it is unusable.

    Raises:
        ValidationError with `reason` set to one of:
            missing      - the form has no such field
            multiple     - the field was sent more than once
            not_a_file   - the field is a plain form value
            no_filename  - the file part carries no filename
    """
    values = form.getlist(field)
    if not values:
        raise ValidationError(
            message=f"Multipart field '{field}' is missing",
            field=field,
            reason="missing",
        )
    if len(values) > 1:
        raise ValidationError(
            message=f"Multipart field '{field}' must contain exactly one file",
            field=field,
            reason="multiple",
            context={"count": len(values)},
        )

    value = values[0]
    if not isinstance(value, UploadFile):
        raise ValidationError(
            message=f"Multipart field '{field}' must be a file upload",
            field=field,
            reason="not_a_file",
        )
    if not value.filename:
        raise ValidationError(
            message=f"Uploaded file in field '{field}' has no filename",
            field=field,
            reason="no_filename",
        )
    return value


def validate_filename(filename: Optional[str]) -> str:
    """Return `filename` unchanged if it is safe to use as a storage key."""
    if not filename:
        raise ValidationError(message="Filename is empty", field=UPLOAD_FIELD, reason="empty_filename")

    if filename in (".", ".."):
        raise ValidationError(
            message=f"Filename '{filename}' is not allowed",
            field=UPLOAD_FIELD,
            reason="unsafe_filename",
        )

    if "/" in filename or "\\" in filename:
        raise ValidationError(
            message="Filename must not contain path separators",
            field=UPLOAD_FIELD,
            reason="unsafe_filename",
            context={"filename": filename},
        )

    if any(ord(ch) < 32 or ord(ch) == 127 for ch in filename):
        raise ValidationError(
            message="Filename must not contain control characters",
            field=UPLOAD_FIELD,
            reason="unsafe_filename",
        )

    if len(filename.encode("utf-8")) > MAX_FILENAME_BYTES:
        raise ValidationError(
            message=f"Filename exceeds {MAX_FILENAME_BYTES} bytes",
            field=UPLOAD_FIELD,
            reason="filename_too_long",
        )

    return filename


class UploadService:
    """
    Writes validated uploads into a single directory.

    Lifecycle of an upload:
        1. validate_filename() on the client-supplied name
        2. Declared size check (UploadFile.size), only when max_size is set
        3. Chunks streamed into .upload-<uuid>.part, counting bytes as they arrive
        4. os.replace() of the temporary file onto <upload_dir>/<filename>
        5. On any failure: the temporary file is removed and nothing is published
    """

    def __init__(
        self,
        upload_dir: Optional[str] = None,
        max_size: Optional[int] = None,
        chunk_size: Optional[int] = None,
    ):
        """
        Args:
            upload_dir: Override settings.upload_dir (used in tests).
            max_size:   Override settings.max_upload_size (None: no limit).
            chunk_size: Override settings.upload_chunk_size.
        """
        self.upload_dir = Path(upload_dir or settings.upload_dir)
        self.max_size = max_size or settings.max_upload_size
        self.chunk_size = chunk_size or settings.upload_chunk_size

    def destination_for(self, filename: str) -> Path:
        return self.upload_dir / validate_filename(filename)

    def _check_size(self, size: int) -> None:
        if self.max_size is not None and size > self.max_size:
            raise PayloadTooLargeError(max_size=self.max_size, context={"size": size})

    async def save(self, upload: UploadFile) -> Tuple[Path, int]:
        """
        Persist `upload` under its own filename.

        Returns:
            Tuple of (destination path, bytes written).

        Raises:
            ValidationError:       unsafe filename
            PayloadTooLargeError:  more than max_size bytes, when a limit is set
            FileStorageError:      the write or the rename failed
        """
        destination = self.destination_for(upload.filename)
        if upload.size is not None:
            self._check_size(upload.size)

        temp_path = self.upload_dir / f".upload-{uuid.uuid4().hex}.part"
        written = 0

        try:
            async with aiofiles.open(temp_path, "wb") as out:
                while True:
                    chunk = await upload.read(self.chunk_size)
                    if not chunk:
                        break
                    written += len(chunk)
                    self._check_size(written)
                    await out.write(chunk)

            await aiofiles.os.replace(temp_path, destination)

        except PayloadTooLargeError:
            await self.discard(temp_path)
            raise
        except OSError as e:
            logger.error("Failed to store upload at %s: %s", destination, str(e))
            await self.discard(temp_path)
            raise FileStorageError(
                message="Failed to save uploaded file. Please try again.",
                context={"path": str(destination), "os_error": str(e)},
            )

        logger.info("File stored: %s (%d bytes)", destination, written)
        return destination, written

    async def discard(self, path: Path) -> None:
        """Remove a temporary file; a file that is already gone is not an error."""
        try:
            await aiofiles.os.remove(path)
            logger.debug("Removed temporary file: %s", path.name)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Failed to remove temporary file %s: %s", path, str(e))
