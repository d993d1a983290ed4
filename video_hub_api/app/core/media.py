"""
Object storage for uploaded media.

Logos, thumbnails and video files are streamed to disk below
``Settings.media_root`` and served by the ``StaticFiles`` mount set up
in ``main.create_app``.  Each stored object is identified by a
``public_id`` (its path relative to the media root), which is what the
database keeps in order to delete or replace the file later.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from .config import Settings, settings
from .db import new_id
from .errors import InvalidRequestError

logger = logging.getLogger(__name__)

UPLOAD_CHUNK_SIZE = 1024 * 1024


@dataclass
class StoredMedia:
    """Location of an object written by ``MediaStorage``."""

    url: str
    public_id: str


class MediaStorage:
    """Filesystem-backed media store.

    Parameters
    ----------
    config : Settings
        Provides ``media_root``, ``media_url`` and ``max_upload_size``.
    """

    def __init__(self, config: Settings) -> None:
        self.root = Path(config.media_root).resolve()
        self.base_url = config.media_url.rstrip("/")
        self.max_size = config.max_upload_size

    def _path_for(self, public_id: str) -> Optional[Path]:
        path = (self.root / public_id).resolve()
        if self.root not in path.parents:
            return None
        return path

    async def save_upload(self, upload: UploadFile, resource_type: str = "image") -> StoredMedia:
        """Stream an uploaded file into the store.

        Raises ``InvalidRequestError`` if the file is larger than the
        configured limit; the partial file is removed in that case.
        """
        suffix = Path(upload.filename or "").suffix.lower()
        public_id = f"{resource_type}/{new_id()}{suffix}"
        target = self.root / public_id
        target.parent.mkdir(parents=True, exist_ok=True)

        total_size = 0
        try:
            with open(target, "wb") as f:
                while True:
                    chunk = await upload.read(UPLOAD_CHUNK_SIZE)
                    if not chunk:
                        break
                    total_size += len(chunk)
                    if total_size > self.max_size:
                        raise InvalidRequestError(
                            f"File too large. Maximum upload size is {self.max_size} bytes"
                        )
                    f.write(chunk)
        except BaseException:
            target.unlink(missing_ok=True)
            raise
        logger.info("Stored %s (%d bytes)", public_id, total_size)
        return StoredMedia(url=f"{self.base_url}/{public_id}", public_id=public_id)

    def destroy(self, public_id: Optional[str]) -> None:
        """Delete a stored object.  Unknown ids are ignored."""
        if not public_id:
            return
        path = self._path_for(public_id)
        if path is None:
            logger.warning("Refusing to delete media outside the store: %s", public_id)
            return
        path.unlink(missing_ok=True)
        logger.info("Removed %s", public_id)


def get_media_storage() -> MediaStorage:
    """Dependency returning a ``MediaStorage`` bound to the app settings."""
    return MediaStorage(settings)
