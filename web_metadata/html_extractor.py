"""
HTML metadata extraction.

Pulls a title and the ordered list of <img> sources out of a page. Parsing is
best effort: malformed markup yields whatever could be recovered and bytes that
are not valid UTF-8 yield nothing at all. Nothing in here raises on bad input.

Title precedence is deliberate: the first <h1> wins over <title>, and the fixed
sentinel is used when neither has text.
"""

import logging
import re
from enum import Enum
from typing import List, Optional, Tuple, Union

from bs4 import BeautifulSoup

from .models import NO_TITLE_FOUND, ExtractedMetadata

logger = logging.getLogger('web_metadata')

_CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f-\x9f]')


class ParseOutcome(str, Enum):
    OK = 'ok'
    NO_TITLE = 'no_title'
    UNDECODABLE = 'undecodable'


def clean_text(text: Optional[str]) -> str:
    """Drop control characters and collapse whitespace runs to single spaces."""
    if not text:
        return ''
    # Whitespace controls become spaces first so words stay apart
    text = ' '.join(text.split())
    return _CONTROL_CHARS.sub('', text)


def decode_html(html: Union[bytes, str]) -> Optional[str]:
    """Decode page bytes as UTF-8; None when they are not valid UTF-8."""
    if isinstance(html, str):
        return html
    try:
        return bytes(html).decode('utf-8')
    except (UnicodeDecodeError, TypeError):
        return None


def extract_title(soup: BeautifulSoup) -> str:
    """Return the <h1> text, else the <title> text, else an empty string."""
    h1_tag = soup.find('h1')
    if h1_tag:
        h1_text = clean_text(h1_tag.get_text())
        if h1_text:
            return h1_text

    title_tag = soup.find('title')
    if title_tag:
        return clean_text(title_tag.get_text())

    return ''


def extract_image_sources(soup: BeautifulSoup) -> List[str]:
    """Collect every non-empty <img src> in document order."""
    sources = []
    for img in soup.find_all('img'):
        src = img.get('src', '').strip()
        if src:
            sources.append(src)
    return sources


def parse_html(html: Union[bytes, str], source_url: str = '') -> Tuple[ExtractedMetadata, ParseOutcome]:
    """Extract metadata and report how well parsing went."""
    text = decode_html(html)
    if text is None:
        logger.debug('Page from %s is not valid UTF-8', source_url or '<unknown>')
        return ExtractedMetadata(title='', source_url=source_url), ParseOutcome.UNDECODABLE

    try:
        soup = BeautifulSoup(text, 'html.parser')
    except Exception as e:  # html.parser gives up on some pathological markup
        logger.debug('Could not parse page from %s: %s', source_url or '<unknown>', e)
        return ExtractedMetadata(title='', source_url=source_url), ParseOutcome.UNDECODABLE

    title = extract_title(soup)
    images = extract_image_sources(soup)

    if not title:
        return ExtractedMetadata(NO_TITLE_FOUND, images, source_url), ParseOutcome.NO_TITLE
    return ExtractedMetadata(title, images, source_url), ParseOutcome.OK


def extract(html: Union[bytes, str], source_url: str = '') -> ExtractedMetadata:
    """Best-effort metadata for a page; see parse_html for the outcome."""
    metadata, _ = parse_html(html, source_url)
    return metadata
