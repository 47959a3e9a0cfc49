"""
URL resolution for image references found in a page.

resolve() is pure and never raises: anything it cannot turn into an absolute
URL comes back unchanged, and callers treat that as unusable.
"""

from typing import Iterable, List
from urllib.parse import urljoin, urlsplit


def _has_scheme_and_host(url: str) -> bool:
    parts = urlsplit(url)
    return bool(parts.scheme and parts.netloc)


def resolve(base: str, candidate: str) -> str:
    """
    Turn a possibly relative URL into an absolute one using the page URL.

    Examples:
        >>> resolve('https://a.com/b/c', '../d.png')
        'https://a.com/d.png'

        >>> resolve('https://a.com', '//cdn.a.com/x.png')
        'https://cdn.a.com/x.png'
    """
    if not candidate or not candidate.strip():
        return candidate

    try:
        parts = urlsplit(candidate)
        if parts.scheme and parts.netloc:
            return candidate

        # Fragment-only or query-only references point at no resource
        if not parts.netloc and not parts.path:
            return candidate

        if not base or not _has_scheme_and_host(base):
            return candidate
        base_parts = urlsplit(base)

        if candidate.startswith('//'):
            return f'{base_parts.scheme}:{candidate}'

        return urljoin(base, candidate)
    except ValueError:
        return candidate


def resolve_all(base: str, candidates: Iterable[str]) -> List[str]:
    """Resolve every candidate, keeping order and duplicates."""
    return [resolve(base, candidate) for candidate in candidates]


def normalize_page_url(url: str) -> str:
    """
    Make user input usable as a fetch target and as a resolution base.

    Schemeless input gets https, so `example.com/post` becomes
    `https://example.com/post`.
    """
    if not url:
        return ''
    url = url.strip()
    if not url:
        return ''
    if url.startswith('//'):
        return 'https:' + url
    try:
        parts = urlsplit(url)
    except ValueError:
        return url
    if parts.scheme and parts.netloc:
        return url
    if not parts.scheme:
        return 'https://' + url
    # "example.com:8080/x" parses with "example.com" as the scheme
    if '.' in parts.scheme or parts.path[:1].isdigit():
        return 'https://' + url
    return url
