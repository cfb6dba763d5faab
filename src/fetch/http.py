"""
HTTP download of article pages, with optional caching.
"""

import logging
from typing import Dict, Optional

import requests

import settings


logger = logging.getLogger(__name__)

# Responses with these content types are never article pages
BAD_CONTENT_TYPES = (
    'audio/mpeg',
    'image/gif',
    'image/jpeg',
    'image/jpg',
    'image/png',
    'application/pdf',
    'application/zip',
)


class ResourceError(Exception):
    """A page could not be fetched or parsed."""


def default_headers() -> Dict[str, str]:
    return {
        'User-Agent': settings.USER_AGENT,
        'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
        'Accept-Language': 'en-US,en;q=0.9',
    }


def _validate_response(response: requests.Response):
    if response.status_code != 200:
        raise ResourceError(
            f"Resource returned a response status code of {response.status_code} "
            f"and resource was instructed to reject non-200 status codes."
        )

    content_type = response.headers.get('Content-Type', '').split(';')[0].strip().lower()
    if content_type in BAD_CONTENT_TYPES:
        raise ResourceError(f"Content-type for this resource was {content_type} and is not allowed.")

    content_length = response.headers.get('Content-Length')
    if content_length and content_length.isdigit() and int(content_length) > settings.MAX_CONTENT_LENGTH:
        raise ResourceError(
            f"Content for this resource was too large. Maximum content length is "
            f"{settings.MAX_CONTENT_LENGTH}."
        )


def download_html(url: str, headers: Optional[Dict[str, str]] = None, use_cache: Optional[bool] = None) -> Dict[str, str]:
    """
    Download the HTML of a URL.

    Blocking; the async resource layer runs it in a worker thread.

    Args:
        url: URL to download
        headers: Extra request headers, merged over the defaults
        use_cache: Read from and save to the page cache. Defaults to
            settings.USE_CACHE.

    Returns:
        Dictionary with:
            - 'content': HTML content as string
            - 'final_url': Final URL after following redirects

    Raises:
        ResourceError: on network failure or an unusable response
    """
    if use_cache is None:
        use_cache = settings.USE_CACHE

    cache_db = None
    if use_cache:
        from db.cache import CacheDatabase

        cache_db = CacheDatabase()
        cached = cache_db.get_cached_content(url)
        if cached and cached['status_code'] == 200:
            logger.debug("Loaded %s from cache (saved %s)", url, cached['created_at'])
            return {'content': cached['content'], 'final_url': cached['url']}

    request_headers = default_headers()
    request_headers.update(headers or {})

    try:
        response = requests.get(url, headers=request_headers, timeout=settings.REQUEST_TIMEOUT)
    except requests.RequestException as e:
        raise ResourceError(f"Error downloading {url}: {e}") from e

    _validate_response(response)

    # requests falls back to ISO-8859-1 for text/html without a charset
    if response.encoding is None or response.encoding.lower() == 'iso-8859-1':
        response.encoding = response.apparent_encoding

    html_content = response.text
    if len(html_content) > settings.MAX_CONTENT_LENGTH:
        raise ResourceError(
            f"Content for this resource was too large. Maximum content length is "
            f"{settings.MAX_CONTENT_LENGTH}."
        )

    final_url = response.url or url

    if cache_db is not None:
        if final_url != url:
            redirect_status = response.history[0].status_code if response.history else 301
            cache_db.save_to_cache(url, final_url, status_code=redirect_status)
        cache_db.save_to_cache(final_url, html_content, status_code=response.status_code)

    return {'content': html_content, 'final_url': final_url}
