"""Web metadata extraction and offline archive caching for bookmark records."""

from .archive_cache import ArchiveCache
from .config import FetcherConfig
from .cover_selector import DETERMINISTIC_LIMIT, CoverImageSelector, select_cover
from .errors import FetchError
from .html_extractor import ParseOutcome, extract, parse_html
from .models import (
    NO_TITLE_FOUND,
    CoverSelection,
    DecodedImage,
    ExtractedMetadata,
    FetchedPage,
    FetchTarget,
    ImageAsset,
    PipelineResult,
    PipelineState,
    ResolvedImage,
)
from .page_fetcher import CancelToken, PageFetcher, fetch_document, fetch_page
from .pipeline import MetadataPipeline
from .records import InFlightTracker, InfoRecord, apply_result, refresh_record, toggle_offline_archive
from .url_resolver import normalize_page_url, resolve, resolve_all

__all__ = [
    # Extraction
    'NO_TITLE_FOUND',
    'ParseOutcome',
    'extract',
    'parse_html',
    # URLs
    'resolve',
    'resolve_all',
    'normalize_page_url',
    # Cover selection
    'DETERMINISTIC_LIMIT',
    'CoverImageSelector',
    'select_cover',
    # Fetching
    'CancelToken',
    'FetcherConfig',
    'FetchError',
    'PageFetcher',
    'fetch_document',
    'fetch_page',
    # Pipeline
    'MetadataPipeline',
    'PipelineResult',
    'PipelineState',
    # Models
    'CoverSelection',
    'DecodedImage',
    'ExtractedMetadata',
    'FetchedPage',
    'FetchTarget',
    'ImageAsset',
    'ResolvedImage',
    # Caching and records
    'ArchiveCache',
    'InFlightTracker',
    'InfoRecord',
    'apply_result',
    'refresh_record',
    'toggle_offline_archive',
]
