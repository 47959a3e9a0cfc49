"""
Metadata Fetcher Cloud Function

Fetches a bookmarked page and returns what the organizer needs to fill in a
record: a title, the page's image URLs and one cover image.

Responsibilities:
- Normalize the submitted URL (schemeless input is accepted)
- Fetch the page once
- Extract title (<h1> first, then <title>) and <img> sources
- Resolve image URLs against the page
- Pick a cover image

Does NOT:
- Write to the record (the caller stores the response verbatim)
- Save offline archives (done on the caller's side through ArchiveCache)
- Retry failed fetches
"""

import functions_framework
import json
import os
import sys
from datetime import datetime, timezone
from urllib.parse import urlparse

# Add the package root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
from web_metadata import MetadataPipeline, normalize_page_url

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': 'POST',
    'Access-Control-Allow-Headers': 'Content-Type',
    'Access-Control-Max-Age': '3600'
}

pipeline = MetadataPipeline()


def build_response(url: str, result) -> dict:
    """Shape a pipeline result into the JSON body returned to the caller."""
    domain = urlparse(result.url or url).netloc.replace('www.', '')
    response = {
        'url': result.url or url,
        'domain': domain,
        'processed_at': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
    }
    response.update(result.to_dict())
    return response


@functions_framework.http
def fetch_web_metadata(request):
    """
    Main Cloud Function entry point.

    Expected JSON input:
    {
        "url": "https://example.com/article"
    }

    Fetch failures still return 200, with the sentinel title, an empty image
    list and an "error" object describing the fetch stage.
    """
    if request.method == 'OPTIONS':
        return ('', 204, CORS_HEADERS)

    headers = {'Access-Control-Allow-Origin': '*'}

    try:
        request_json = request.get_json(silent=True)

        url = (request_json or {}).get('url')
        if not isinstance(url, str) or not normalize_page_url(url):
            return (json.dumps({
                'error': 'Missing required field: url'
            }), 400, headers)

        result = pipeline.run_sync(url)
        if result.error:
            print(f"Fetch failed for {result.url}: {result.error.message}")

        return (json.dumps(build_response(url, result)), 200, headers)

    except Exception as e:
        print(f"Unhandled error: {e}")
        return (json.dumps({
            'error': {
                'stage': 'processing',
                'message': str(e),
                'recoverable': False
            }
        }), 500, headers)
