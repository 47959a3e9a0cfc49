"""
Error taxonomy for metadata fetching.

Network problems are not raised. They travel back to the caller as a
FetchError value next to the (missing) data, mirroring the `(html, error)`
tuples used by the fetch helpers:

NETWORK ERRORS (recoverable, caller shows the sentinel title):
- timeout
- connection (DNS failure, refused connection, other transport errors)
- http_status (any non-2xx response)
- too_large (response body over the configured cap)
- invalid_url (nothing fetchable in the input)

CANCELLATION (distinct, caller keeps its previous state):
- cancelled

Parse problems are never errors; they only reduce the extracted metadata.
"""

from dataclasses import dataclass
from typing import Optional

TIMEOUT = 'timeout'
CONNECTION = 'connection'
HTTP_STATUS = 'http_status'
TOO_LARGE = 'too_large'
INVALID_URL = 'invalid_url'
CANCELLED = 'cancelled'

NETWORK_ERROR_KINDS = (TIMEOUT, CONNECTION, HTTP_STATUS, TOO_LARGE, INVALID_URL)


@dataclass(frozen=True)
class FetchError:
    """Why a fetch produced no data."""

    kind: str
    message: str
    status_code: Optional[int] = None

    @property
    def is_cancellation(self) -> bool:
        return self.kind == CANCELLED

    @property
    def recoverable(self) -> bool:
        # Every failure degrades to a renderable result; nothing is fatal.
        return True

    def to_dict(self) -> dict:
        return {
            'stage': 'fetch',
            'kind': self.kind,
            'message': self.message,
            'recoverable': self.recoverable,
        }

    @classmethod
    def cancelled(cls, url: str) -> 'FetchError':
        return cls(CANCELLED, f'Fetch cancelled: {url}')
