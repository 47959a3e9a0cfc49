"""
Offline archive and image asset storage, keyed by record id.

Each record owns at most one archive blob (opaque bytes, present and complete
or absent) and an ordered list of ImageAssets of which at most one is the
cover. Every operation runs under one lock, so readers going through
images() / cover_image() never see a cover change half applied.

Operations that find nothing to do are no-ops that return False, never errors.
"""

import logging
import threading
from dataclasses import replace
from typing import Dict, List, Optional

from .images import is_image_data
from .models import ImageAsset

logger = logging.getLogger('web_metadata')


class ArchiveCache:
    """In-memory store for web archives and record images."""

    def __init__(self):
        self._lock = threading.RLock()
        self._archives: Dict[str, bytes] = {}
        self._images: Dict[str, List[ImageAsset]] = {}

    # ------------------------------------------------------------------
    # Web archives
    # ------------------------------------------------------------------

    def save_archive(self, record_id: str, blob: bytes) -> None:
        """Store the snapshot for record_id, replacing any previous one."""
        if not isinstance(blob, (bytes, bytearray, memoryview)):
            raise TypeError(f'Archive blob must be bytes, got {type(blob).__name__}')
        data = bytes(blob)
        with self._lock:
            self._archives[record_id] = data
        logger.debug('Saved %d byte archive for %s', len(data), record_id)

    def has_archive(self, record_id: str) -> bool:
        with self._lock:
            return record_id in self._archives

    def get_archive(self, record_id: str) -> Optional[bytes]:
        with self._lock:
            return self._archives.get(record_id)

    def clear_archive(self, record_id: str) -> bool:
        """Remove the snapshot; clearing an absent archive is a no-op."""
        with self._lock:
            return self._archives.pop(record_id, None) is not None

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def _find(self, record_id: str, image: ImageAsset) -> Optional[ImageAsset]:
        for owned in self._images.get(record_id, []):
            if owned.same_image(image):
                return owned
        return None

    def add_image(self, record_id: str, image: ImageAsset) -> ImageAsset:
        """Append a copy of image unless the record already owns it.

        Returns a snapshot of the stored asset; changing it does not touch the
        cache, so covers only move through set_cover_image().
        """
        with self._lock:
            owned = self._find(record_id, image)
            if owned is None:
                owned = replace(image)
                if owned.is_cover:
                    for other in self._images.get(record_id, []):
                        other.is_cover = False
                self._images.setdefault(record_id, []).append(owned)
            return replace(owned)

    def add_image_url(self, record_id: str, url: str) -> Optional[ImageAsset]:
        """Attach a remote image reference. Blank URLs are ignored."""
        if not url or not url.strip():
            return None
        return self.add_image(record_id, ImageAsset(remote_url=url.strip()))

    def add_image_data(self, record_id: str, data: bytes) -> Optional[ImageAsset]:
        """Attach an embedded image payload such as a picked photo.

        Payloads whose signature is not a known image format are ignored.
        """
        if not is_image_data(data):
            logger.debug('Ignoring %d byte non-image payload for %s', len(data or b''), record_id)
            return None
        return self.add_image(record_id, ImageAsset(binary_data=bytes(data)))

    def images(self, record_id: str) -> List[ImageAsset]:
        """Consistent snapshot of the record's images, in insertion order."""
        with self._lock:
            return [replace(image) for image in self._images.get(record_id, [])]

    def cover_image(self, record_id: str) -> Optional[ImageAsset]:
        with self._lock:
            for image in self._images.get(record_id, []):
                if image.is_cover:
                    return replace(image)
            return None

    def set_cover_image(self, record_id: str, image: ImageAsset) -> ImageAsset:
        """Make image the only cover of the record, appending it if needed.

        Returns a snapshot of the new cover.
        """
        with self._lock:
            owned = self._find(record_id, image)
            if owned is None:
                owned = replace(image)
                self._images.setdefault(record_id, []).append(owned)
            for other in self._images[record_id]:
                other.is_cover = other is owned
            return replace(owned)

    def delete_image(self, record_id: str, image: ImageAsset) -> bool:
        """Remove image from the record. No replacement cover is chosen."""
        with self._lock:
            owned = self._find(record_id, image)
            if owned is None:
                return False
            self._images[record_id].remove(owned)
            if not self._images[record_id]:
                del self._images[record_id]
            return True

    # ------------------------------------------------------------------
    # Records
    # ------------------------------------------------------------------

    def delete_record(self, record_id: str) -> None:
        """Drop everything owned by a deleted record."""
        with self._lock:
            self._archives.pop(record_id, None)
            self._images.pop(record_id, None)
