"""
Record-side helpers for callers that own an info record.

The pipeline never writes to a record itself. These helpers are the thin
collaborator layer: they keep one fetch per record in flight, apply finished
results, and drive the offline archive toggle.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .archive_cache import ArchiveCache
from .models import ImageAsset, PipelineResult
from .page_fetcher import CancelToken, PageFetcher
from .pipeline import MetadataPipeline
from .url_resolver import normalize_page_url

logger = logging.getLogger('web_metadata')


@dataclass
class InfoRecord:
    """The fields a bookmark record exposes to metadata fetching."""

    record_id: str
    url: str = ''
    title: str = ''
    image_urls: List[str] = field(default_factory=list)


class InFlightTracker:
    """Per-record in-flight tokens, replacing a view-local busy flag."""

    def __init__(self):
        self._lock = threading.Lock()
        self._tokens: Dict[str, CancelToken] = {}

    def begin(self, record_id: str) -> Optional[CancelToken]:
        """Claim the record; None if a fetch for it is already in flight."""
        with self._lock:
            if record_id in self._tokens:
                return None
            token = CancelToken()
            self._tokens[record_id] = token
            return token

    def is_busy(self, record_id: str) -> bool:
        with self._lock:
            return record_id in self._tokens

    def cancel(self, record_id: str) -> bool:
        with self._lock:
            token = self._tokens.get(record_id)
        if token is None:
            return False
        token.cancel()
        return True

    def finish(self, record_id: str, token: CancelToken) -> None:
        with self._lock:
            if self._tokens.get(record_id) is token:
                del self._tokens[record_id]


def apply_result(record: InfoRecord, result: PipelineResult, cache: ArchiveCache) -> bool:
    """
    Write a pipeline result into the record.

    Cancelled runs leave the record exactly as it was. Any other result,
    including a failed fetch with the sentinel title, is applied.
    """
    if result.cancelled:
        return False

    record.title = result.title
    record.image_urls = list(result.image_urls)
    if result.cover_image_url:
        cache.set_cover_image(record.record_id, ImageAsset(remote_url=result.cover_image_url))
    return True


async def refresh_record(record: InfoRecord, pipeline: MetadataPipeline, cache: ArchiveCache,
                         tracker: InFlightTracker) -> Optional[PipelineResult]:
    """Fetch metadata for the record's URL and apply it. None when already busy."""
    token = tracker.begin(record.record_id)
    if token is None:
        logger.info('Fetch for %s already in flight, ignoring request', record.record_id)
        return None
    try:
        result = await pipeline.run(record.url, token)
        apply_result(record, result, cache)
        return result
    finally:
        tracker.finish(record.record_id, token)


def toggle_offline_archive(record: InfoRecord, cache: ArchiveCache,
                           fetcher: Optional[PageFetcher] = None,
                           tracker: Optional[InFlightTracker] = None) -> bool:
    """
    Save the page for offline reading, or drop the saved copy if there is one.

    Returns whether the record has an archive afterwards. A failed fetch leaves
    the record without one. With a tracker, a save is not started while another
    fetch for the record is in flight, and tracker.cancel() stops it.
    """
    if cache.has_archive(record.record_id):
        cache.clear_archive(record.record_id)
        return False

    token = None
    if tracker is not None:
        token = tracker.begin(record.record_id)
        if token is None:
            logger.info('Fetch for %s already in flight, not saving offline', record.record_id)
            return cache.has_archive(record.record_id)

    try:
        fetcher = fetcher or PageFetcher()
        data, error = fetcher.fetch_sync(normalize_page_url(record.url), token)
        if error:
            logger.warning('Could not save %s offline: %s', record.url, error.message)
            return False
        cache.save_archive(record.record_id, data)
        return True
    finally:
        if token is not None:
            tracker.finish(record.record_id, token)
