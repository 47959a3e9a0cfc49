"""Data models shared by the fetch, extraction and caching stages."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Protocol

from .errors import FetchError
from .images import detect_image_format

# Fixed fallback title used whenever no real title can be extracted
NO_TITLE_FOUND = 'no title found'


class PipelineState(str, Enum):
    IDLE = 'idle'
    FETCHING = 'fetching'
    EXTRACTING = 'extracting'
    RESOLVING = 'resolving'
    SELECTING = 'selecting'
    DONE = 'done'
    FAILED = 'failed'


@dataclass(frozen=True)
class FetchTarget:
    url: str


@dataclass(frozen=True)
class FetchedPage:
    """Body of a fetched page and the URL that served it, after redirects."""

    url: str
    content: bytes


@dataclass
class ExtractedMetadata:
    """Raw metadata pulled out of one HTML document.

    image_candidates keeps document order and duplicates; entries may still be
    page-relative.
    """

    title: str
    image_candidates: List[str] = field(default_factory=list)
    source_url: str = ''


@dataclass(frozen=True)
class ResolvedImage:
    absolute_url: str


@dataclass(frozen=True)
class CoverSelection:
    """At most one chosen image; empty string when there was nothing to pick."""

    chosen_url: str = ''

    @property
    def is_empty(self) -> bool:
        return not self.chosen_url


@dataclass(eq=False)
class ImageAsset:
    """An image owned by a record: a remote URL reference or embedded bytes."""

    remote_url: str = ''
    binary_data: Optional[bytes] = None
    is_cover: bool = False

    def __post_init__(self):
        if not self.remote_url and self.binary_data is None:
            raise ValueError('ImageAsset needs a remote_url or binary_data')

    @property
    def image_format(self) -> Optional[str]:
        return detect_image_format(self.binary_data)

    def same_image(self, other: 'ImageAsset') -> bool:
        """True when both assets denote the same image."""
        if self is other:
            return True
        if self.remote_url or other.remote_url:
            return self.remote_url == other.remote_url
        return self.binary_data == other.binary_data


class DecodedImage(Protocol):
    """A displayable surface produced by a platform decoder from raw bytes.

    Rendering layers implement this; nothing in this package creates one.
    """

    width: int
    height: int


@dataclass
class PipelineResult:
    """Outcome of one metadata pipeline run."""

    url: str
    state: PipelineState
    title: str = ''
    cover_image_url: str = ''
    image_urls: List[str] = field(default_factory=list)
    error: Optional[FetchError] = None
    stages: List[PipelineState] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.state == PipelineState.FAILED

    @property
    def cancelled(self) -> bool:
        return self.error is not None and self.error.is_cancellation

    def to_dict(self) -> dict:
        data = {
            'title': self.title,
            'coverImageURL': self.cover_image_url,
            'imageURLs': list(self.image_urls),
        }
        if self.error:
            data['error'] = self.error.to_dict()
        return data
