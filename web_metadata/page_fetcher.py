"""
Page fetching.

One GET per call, no retries, redirects left to requests' defaults. Every
failure comes back as a FetchError next to a None body so callers always get a
renderable result. Callers can stop a fetch through a CancelToken; the token is
checked before the request, once headers arrive, between body chunks and once
the body has been read.
"""

import asyncio
import logging
import threading
from typing import Optional, Tuple

import requests

from .config import FetcherConfig
from .errors import CONNECTION, HTTP_STATUS, INVALID_URL, TIMEOUT, TOO_LARGE, FetchError
from .models import FetchedPage

logger = logging.getLogger('web_metadata')

FetchOutcome = Tuple[Optional[bytes], Optional[FetchError]]
DocumentOutcome = Tuple[Optional[FetchedPage], Optional[FetchError]]


class CancelToken:
    """Cooperative stop signal shared between a caller and one fetch."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


def _is_cancelled(cancel_token: Optional[CancelToken]) -> bool:
    return cancel_token is not None and cancel_token.cancelled


def _declared_length(response: requests.Response) -> Optional[int]:
    value = response.headers.get('Content-Length', '')
    return int(value) if value.isdigit() else None


def _read_body(response: requests.Response, url: str, config: FetcherConfig,
               cancel_token: Optional[CancelToken]) -> FetchOutcome:
    """Stream the body in chunks, enforcing the size cap and cancellation."""
    declared = _declared_length(response)
    if declared is not None and declared > config.max_response_bytes:
        return None, FetchError(TOO_LARGE, f'Response too large: {declared} bytes')

    chunks = []
    total = 0
    for chunk in response.iter_content(chunk_size=config.chunk_size):
        if _is_cancelled(cancel_token):
            return None, FetchError.cancelled(url)
        total += len(chunk)
        if total > config.max_response_bytes:
            return None, FetchError(TOO_LARGE, f'Response exceeded {config.max_response_bytes} bytes')
        chunks.append(chunk)

    if _is_cancelled(cancel_token):
        return None, FetchError.cancelled(url)
    return b''.join(chunks), None


def fetch_document(url: str, config: Optional[FetcherConfig] = None,
                   cancel_token: Optional[CancelToken] = None,
                   session: Optional[requests.Session] = None) -> DocumentOutcome:
    """Fetch a page and the URL it was served from. Returns (page, error)."""
    config = config or FetcherConfig()

    if _is_cancelled(cancel_token):
        return None, FetchError.cancelled(url)
    if not url:
        return None, FetchError(INVALID_URL, 'No URL given')

    owns_session = session is None
    if owns_session:
        session = requests.Session()

    try:
        response = session.get(url, headers=config.headers(), timeout=config.timeout,
                               stream=True, allow_redirects=True)
        try:
            if _is_cancelled(cancel_token):
                return None, FetchError.cancelled(url)
            if not 200 <= response.status_code < 300:
                return None, FetchError(HTTP_STATUS, f'HTTP error: {response.status_code}',
                                        response.status_code)
            data, error = _read_body(response, url, config, cancel_token)
            if error:
                return None, error
            # response.url is the last hop after any redirects
            return FetchedPage(url=response.url or url, content=data), None
        finally:
            response.close()

    except requests.exceptions.Timeout:
        return None, FetchError(TIMEOUT, 'Request timed out')
    except (requests.exceptions.MissingSchema, requests.exceptions.InvalidSchema,
            requests.exceptions.InvalidURL) as e:
        return None, FetchError(INVALID_URL, f'Invalid URL: {e}')
    except requests.exceptions.RequestException as e:
        return None, FetchError(CONNECTION, f'Request failed: {e}')
    finally:
        if owns_session:
            session.close()


def fetch_page(url: str, config: Optional[FetcherConfig] = None,
               cancel_token: Optional[CancelToken] = None,
               session: Optional[requests.Session] = None) -> FetchOutcome:
    """Fetch raw page bytes. Returns (data, error)."""
    page, error = fetch_document(url, config, cancel_token, session)
    if error:
        return None, error
    return page.content, None


class PageFetcher:
    """Async front end for fetch_page.

    The blocking request runs on a worker thread, so fetches for different
    targets can run concurrently; nothing is shared between calls.
    """

    def __init__(self, config: Optional[FetcherConfig] = None):
        self.config = config or FetcherConfig()

    def fetch_document_sync(self, url: str, cancel_token: Optional[CancelToken] = None) -> DocumentOutcome:
        page, error = fetch_document(url, self.config, cancel_token)
        if error:
            logger.info('Fetch of %s failed (%s): %s', url, error.kind, error.message)
        elif page.url != url:
            logger.debug('Fetch of %s was served from %s', url, page.url)
        return page, error

    async def fetch_document(self, url: str, cancel_token: Optional[CancelToken] = None) -> DocumentOutcome:
        token = cancel_token or CancelToken()
        try:
            page, error = await asyncio.to_thread(self.fetch_document_sync, url, token)
        except asyncio.CancelledError:
            # Let the worker thread stop at its next check
            token.cancel()
            raise
        if token.cancelled:
            return None, FetchError.cancelled(url)
        return page, error

    def fetch_sync(self, url: str, cancel_token: Optional[CancelToken] = None) -> FetchOutcome:
        page, error = self.fetch_document_sync(url, cancel_token)
        return (page.content if page else None), error

    async def fetch(self, url: str, cancel_token: Optional[CancelToken] = None) -> FetchOutcome:
        page, error = await self.fetch_document(url, cancel_token)
        return (page.content if page else None), error
