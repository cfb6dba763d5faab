"""
Article parser: turns a URL into a structured article.

    >>> import asyncio
    >>> from article_parser import parse
    >>> article = asyncio.run(parse("https://www.diariolibre.com/actualidad/..."))
    >>> article['title'], article['word_count']
"""

import asyncio
import logging
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlparse

from extractors import ExtractorDefinition, add_extractor, extractor_registry
from extractors.collect_all_pages import collect_all_pages
from extractors.content_type import CONTENT_TYPES, transform
from extractors.root_extractor import RootExtractor, select_extended_types
from fetch import Resource, ResourceError


logger = logging.getLogger(__name__)

INVALID_URL_MESSAGE = (
    'The url parameter passed does not look like a valid URL. '
    'Please check your URL and try again.'
)


def validate_url(url) -> bool:
    """True for absolute http(s) URLs with a host."""
    if not url or not isinstance(url, str):
        return False
    parsed = urlparse(url)
    return parsed.scheme in ('http', 'https') and bool(parsed.netloc)


async def fetch_resource(url: str, headers: Optional[Dict[str, str]] = None):
    """
    Fetch and prepare the document for `url` without extracting anything.

    Useful to try selectors while writing a custom extractor.

    Returns:
        DocumentHandle, or an error record with "failed" set when the page
        cannot be fetched
    """
    try:
        return await Resource.create(url, headers=headers)
    except ResourceError as e:
        return {"error": True, "failed": True, "message": str(e)}


async def parse(
    url: str,
    *,
    html: Optional[str] = None,
    fetch_all_pages: bool = True,
    fallback: bool = True,
    content_type: str = 'html',
    headers: Optional[Dict[str, str]] = None,
    extend: Optional[Mapping[str, Any]] = None,
    custom_extractor=None,
) -> Dict[str, Any]:
    """
    Extract the article at `url`.

    Args:
        url: Page URL, also used to pick the extractor
        html: Page markup; when given the page is not downloaded
        fetch_all_pages: Follow next-page links and merge the pages
        fallback: Use the generic extractor for fields a definition misses
        content_type: "html", "markdown" or "text"
        headers: Extra request headers
        extend: Extra named field rules evaluated against the page
        custom_extractor: Definition (or mapping) registered before lookup

    Returns:
        dict: every result field, the extended fields and "extractor" (the
        definition used, or None). Invalid URLs and fetch failures return
        {"error": True, "message": ...} instead, as do unknown content types.
    """
    if not validate_url(url):
        return {"error": True, "message": INVALID_URL_MESSAGE}
    if content_type not in CONTENT_TYPES:
        return {
            "error": True,
            "message": f"Unknown content type '{content_type}', expected one of {', '.join(CONTENT_TYPES)}",
        }

    try:
        handle = await Resource.create(url, html=html, headers=headers)
    except ResourceError as e:
        logger.warning("Could not load %s: %s", url, e)
        return {"error": True, "message": str(e)}

    if custom_extractor:
        added = add_extractor(custom_extractor)
        if isinstance(added, dict) and added.get('error'):
            logger.warning("Ignoring custom extractor: %s", added['message'])

    definition = extractor_registry.resolve(url)
    logger.info("Parsing %s with %s", url, definition if definition else "generic extractor")

    raw_html = html if html is not None else handle.html

    # Rules passed by the caller win over the definition's own extra fields
    extend_rules = dict(definition.extend) if definition is not None else {}
    extend_rules.update(extend or {})

    extended = {}
    if extend_rules:
        extended = select_extended_types(extend_rules, handle, url)

    result = RootExtractor.extract(
        definition,
        handle,
        url=url,
        fallback=fallback,
        content_type=content_type,
    )

    if fetch_all_pages and result.get('next_page_url'):
        result = await collect_all_pages(
            result,
            url,
            extractor_registry,
            title=result.get('title'),
            headers=headers,
            fallback=fallback,
            content_type=content_type,
        )
    else:
        result['total_pages'] = 1
        result['rendered_pages'] = 1

    result['content'] = transform(result.get('content'), content_type)

    # Without a site definition the caller also gets the untouched page
    if definition is None:
        result['content'] = raw_html

    return {**result, **extended, 'extractor': definition}


def parse_sync(url: str, **options) -> Dict[str, Any]:
    """Blocking wrapper around parse() for callers without an event loop."""
    return asyncio.run(parse(url, **options))


__all__ = [
    'ExtractorDefinition',
    'INVALID_URL_MESSAGE',
    'add_extractor',
    'fetch_resource',
    'parse',
    'parse_sync',
    'validate_url',
]
