"""
Shared pytest fixtures for web metadata tests.
"""

import pytest
import sys
import importlib.util
from pathlib import Path

from web_metadata import ArchiveCache, FetcherConfig, InFlightTracker

# Project root for finding Cloud Function modules
PROJECT_ROOT = Path(__file__).parent.parent


def _load_module_from_path(module_name: str, file_path: Path):
    """Load a module from a specific file path."""
    spec = importlib.util.spec_from_file_location(module_name, file_path)
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)
    return module


# Load the Cloud Function module with a unique name at module load time
_metadata_fetcher_module = _load_module_from_path(
    'metadata_fetcher_main',
    PROJECT_ROOT / 'metadata-fetcher' / 'main.py'
)


# ============================================================================
# Cloud Function Fixtures
# ============================================================================

@pytest.fixture
def metadata_fetcher_module():
    """Returns the loaded metadata-fetcher module."""
    return _metadata_fetcher_module


@pytest.fixture
def fetch_web_metadata():
    """Returns main entry point from metadata-fetcher."""
    return _metadata_fetcher_module.fetch_web_metadata


@pytest.fixture
def mock_flask_request():
    """Factory for creating mock Flask request objects."""
    class MockRequest:
        def __init__(self, json_data=None, method='POST'):
            self._json = json_data
            self.method = method
            self.data = b''

        def get_json(self, force=False, silent=False):
            return self._json

    return MockRequest


# ============================================================================
# Component Fixtures
# ============================================================================

@pytest.fixture
def cache():
    return ArchiveCache()


@pytest.fixture
def tracker():
    return InFlightTracker()


@pytest.fixture
def small_config():
    """Fetcher settings with a tiny response cap."""
    return FetcherConfig(timeout=5, max_response_bytes=1024, chunk_size=256)


# ============================================================================
# Sample Pages
# ============================================================================

@pytest.fixture
def sample_article_html():
    """Article page with both <h1> and <title>, and relative images."""
    return b"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="utf-8">
        <title>10 Python Tips | Example Blog</title>
    </head>
    <body>
        <article>
            <h1>10 Python Tips You Should Know</h1>
            <img src="/images/hero.jpg" alt="Hero">
            <p>Here are some tips for Python development.</p>
            <img src="diagram.png">
            <img src="https://cdn.example.com/photo.webp">
        </article>
    </body>
    </html>
    """


@pytest.fixture
def sample_gallery_html():
    """Gallery page with more images than the deterministic cover limit."""
    return b"""
    <html><head><title>Gallery</title></head>
    <body>
        <img src="/g/1.jpg"><img src="/g/2.jpg"><img src="/g/3.jpg">
        <img src="/g/4.jpg"><img src="/g/5.jpg"><img src="/g/6.jpg">
    </body></html>
    """


@pytest.fixture
def untitled_html():
    """Page with neither <h1> nor <title>, and no images."""
    return b"<html><body><p>Just some text</p></body></html>"
