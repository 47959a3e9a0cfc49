"""
Metadata pipeline: Fetch -> Extract -> Resolve -> Select.

Only the fetch can fail the run. Every later stage works on best-effort data
and degrades to empty results instead. The states a run passes through are
recorded on the result:

    idle -> fetching -> extracting -> resolving -> selecting -> done
    idle -> fetching -> failed            (network error or cancellation)

A run keeps all of its state in locals, so one pipeline object can serve
concurrent runs for different records. Keeping a single run per record in
flight is up to the caller (see records.InFlightTracker).
"""

import logging
from typing import Optional

from .cover_selector import CoverImageSelector
from .errors import INVALID_URL, FetchError
from .html_extractor import parse_html
from .models import NO_TITLE_FOUND, FetchTarget, PipelineResult, PipelineState, ResolvedImage
from .page_fetcher import CancelToken, PageFetcher
from .url_resolver import normalize_page_url, resolve_all

logger = logging.getLogger('web_metadata')


class MetadataPipeline:
    """Turn a URL into a title, an image list and a cover image."""

    def __init__(self, fetcher: Optional[PageFetcher] = None,
                 selector: Optional[CoverImageSelector] = None):
        self.fetcher = fetcher or PageFetcher()
        self.selector = selector or CoverImageSelector()

    def _failed(self, url: str, error: FetchError, stages: list) -> PipelineResult:
        stages.append(PipelineState.FAILED)
        # A cancelled run must not look like data, so it carries no title
        title = '' if error.is_cancellation else NO_TITLE_FOUND
        return PipelineResult(url=url, state=PipelineState.FAILED, title=title,
                              error=error, stages=stages)

    def _process(self, url: str, data: bytes, stages: list) -> PipelineResult:
        # url is where the page was served from; relative images resolve against it
        stages.append(PipelineState.EXTRACTING)
        metadata, outcome = parse_html(data, url)
        title = metadata.title or NO_TITLE_FOUND
        logger.debug('Extracted %d image candidates from %s (%s)',
                     len(metadata.image_candidates), url, outcome.value)

        stages.append(PipelineState.RESOLVING)
        resolved = [ResolvedImage(u) for u in resolve_all(url, metadata.image_candidates)]
        image_urls = [image.absolute_url for image in resolved]

        stages.append(PipelineState.SELECTING)
        selection = self.selector.select(image_urls)

        stages.append(PipelineState.DONE)
        return PipelineResult(url=url, state=PipelineState.DONE, title=title,
                              cover_image_url=selection.chosen_url,
                              image_urls=image_urls, stages=stages)

    def _start(self, url: str):
        stages = [PipelineState.IDLE]
        target = FetchTarget(normalize_page_url(url))
        stages.append(PipelineState.FETCHING)
        return target.url, stages

    async def run(self, url: str, cancel_token: Optional[CancelToken] = None) -> PipelineResult:
        target, stages = self._start(url)
        if not target:
            return self._failed(url, FetchError(INVALID_URL, 'No URL given'), stages)

        page, error = await self.fetcher.fetch_document(target, cancel_token)
        if error:
            return self._failed(target, error, stages)
        return self._process(page.url, page.content, stages)

    def run_sync(self, url: str, cancel_token: Optional[CancelToken] = None) -> PipelineResult:
        """Blocking variant of run() for callers without an event loop."""
        target, stages = self._start(url)
        if not target:
            return self._failed(url, FetchError(INVALID_URL, 'No URL given'), stages)

        page, error = self.fetcher.fetch_document_sync(target, cancel_token)
        if error:
            return self._failed(target, error, stages)
        return self._process(page.url, page.content, stages)
