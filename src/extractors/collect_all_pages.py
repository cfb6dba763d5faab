"""
Pagination: follows next-page links and merges the pages into one article.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Set

import settings
from fetch import Resource, ResourceError

from .generic import GenericExtractor
from .root_extractor import RootExtractor


logger = logging.getLogger(__name__)


@dataclass
class PaginationState:
    result: Dict[str, Any]
    title: Optional[str]
    url: str
    next_page_url: Optional[str]
    visited: Set[str] = field(default_factory=set)
    page_count: int = 1

    def __post_init__(self):
        self.visited.add(self.url)

    def should_continue(self, max_pages: int) -> bool:
        return bool(self.next_page_url) and self.next_page_url not in self.visited and self.page_count < max_pages


async def collect_all_pages(
    result: Dict[str, Any],
    url: str,
    registry,
    title: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
    fallback: bool = True,
    content_type: str = 'html',
    max_pages: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Fetch and append every following page of an article.

    Only the content of later pages is kept; title, author and the other
    fields come from the first page. Stops when a page has no next link,
    when a link points back to a page already collected, when a page cannot
    be fetched or after `max_pages` pages. A failed fetch is not an error:
    the pages collected so far are returned.
    """
    if max_pages is None:
        max_pages = settings.MAX_PAGES

    state = PaginationState(
        result=dict(result),
        title=title,
        url=url,
        next_page_url=result.get('next_page_url'),
    )

    while state.should_continue(max_pages):
        page_url = state.next_page_url
        logger.debug("Fetching page %s of %s: %s", state.page_count + 1, url, page_url)

        try:
            handle = await Resource.create(page_url, headers=headers)
        except ResourceError as e:
            logger.warning("Stopping pagination of %s at %s: %s", url, page_url, e)
            break

        # Syndicated pages can live on another domain
        definition = registry.resolve(page_url)
        page = RootExtractor.extract(
            definition,
            handle,
            url=page_url,
            fallback=fallback,
            content_type=content_type,
            previous_urls=state.visited,
        )

        state.page_count += 1
        state.visited.add(page_url)
        state.result['content'] = (
            f"{state.result.get('content') or ''}<hr><h4>Page {state.page_count}</h4>{page.get('content') or ''}"
        )
        state.next_page_url = page.get('next_page_url')

    if state.next_page_url and state.next_page_url in state.visited:
        logger.debug("Pagination of %s looped back to %s", url, state.next_page_url)

    state.result['total_pages'] = state.page_count
    state.result['rendered_pages'] = state.page_count
    state.result['word_count'] = GenericExtractor.word_count(content=state.result.get('content'))
    return state.result
