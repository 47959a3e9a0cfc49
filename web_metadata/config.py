"""
Configuration for page fetching.

Values come from environment variables so the same code runs unchanged as a
Cloud Function and as a library. Anything not set falls back to the defaults
below.
"""

import os
from dataclasses import dataclass, field

# Configuration
USER_AGENT = os.environ.get(
    'WEB_METADATA_USER_AGENT',
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
)
FETCH_TIMEOUT = float(os.environ.get('WEB_METADATA_TIMEOUT', '30'))
MAX_RESPONSE_BYTES = int(os.environ.get('WEB_METADATA_MAX_BYTES', str(5 * 1024 * 1024)))
CHUNK_SIZE = 64 * 1024

ACCEPT_HEADERS = {
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
    'Accept-Language': 'en-US,en;q=0.5',
}


@dataclass
class FetcherConfig:
    """Settings for a single page fetch."""

    timeout: float = FETCH_TIMEOUT
    max_response_bytes: int = MAX_RESPONSE_BYTES
    user_agent: str = USER_AGENT
    chunk_size: int = CHUNK_SIZE
    extra_headers: dict = field(default_factory=dict)

    def headers(self) -> dict:
        headers = {'User-Agent': self.user_agent, **ACCEPT_HEADERS}
        headers.update(self.extra_headers)
        return headers
