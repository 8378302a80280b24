"""Local disk storage for recipe images."""

import logging
import re
import uuid
from pathlib import Path
from typing import BinaryIO

from recipes_api.config import Settings
from recipes_api.exceptions import StorageError, UploadError, UploadTooLargeError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
MAX_NAME_LENGTH = 100

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def sanitize_filename(filename: str | None) -> str:
    """Reduce a client-supplied filename to a safe final path component."""
    name = (filename or "").replace("\\", "/").rsplit("/", 1)[-1]
    name = _UNSAFE_CHARS.sub("_", name).lstrip(".")
    return name[-MAX_NAME_LENGTH:] or "upload"


class ImageStore:
    """Writes uploaded images under a dedicated directory with server-generated names."""

    def __init__(self, settings: Settings):
        self.directory = Path(settings.image_dir)
        self.max_bytes = settings.max_image_bytes

    def path_for(self, name: str) -> Path:
        return self.directory / name

    def save(self, stream: BinaryIO, filename: str | None) -> str:
        """Copy an upload stream to disk and return the stored file name."""
        stored_name = f"{uuid.uuid4().hex}-{sanitize_filename(filename)}"
        target = self.path_for(stored_name)

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            out = target.open("xb")
        except OSError as e:
            logger.error(f"Cannot write to image directory {self.directory}: {e}")
            raise StorageError("Unable to store image") from e

        written = 0
        try:
            with out:
                while True:
                    try:
                        chunk = stream.read(CHUNK_SIZE)
                    except (OSError, ValueError) as e:
                        raise UploadError() from e
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_bytes:
                        raise UploadTooLargeError(self.max_bytes)
                    out.write(chunk)
        except UploadError:
            target.unlink(missing_ok=True)
            raise
        except OSError as e:
            target.unlink(missing_ok=True)
            logger.error(f"Failed writing image {stored_name}: {e}")
            raise StorageError("Unable to store image") from e

        logger.info(f"Stored image {stored_name} ({written} bytes)")
        return stored_name

    def delete(self, name: str) -> None:
        """Remove a stored image if present."""
        try:
            self.path_for(Path(name).name).unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to remove image {name}: {e}")
