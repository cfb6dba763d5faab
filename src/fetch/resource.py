"""
Turns a URL (or markup supplied by the caller) into a DocumentHandle.
"""

import asyncio
import logging
from typing import Dict, Optional

from bs4 import Comment

from .document import DocumentHandle
from .http import ResourceError, download_html


logger = logging.getLogger(__name__)

# Attributes commonly used by lazy-loading scripts to hold the real image
LAZY_IMAGE_ATTRS = ('data-src', 'data-original', 'data-lazy-src', 'data-srcset', 'data-lazy-srcset')


class Resource:
    """Entry point for acquiring documents."""

    @staticmethod
    async def create(url: str, html: Optional[str] = None, headers: Optional[Dict[str, str]] = None) -> DocumentHandle:
        """
        Build a DocumentHandle for `url`.

        When `html` is given no request is made. Otherwise the page is
        downloaded in a worker thread so the caller's event loop stays free.

        Raises:
            ResourceError: when the page cannot be fetched or parsed
        """
        if html is None:
            logger.debug("Fetching %s", url)
            response = await asyncio.to_thread(download_html, url, headers)
            html = response['content']

        return Resource.generate_doc(html, url)

    @staticmethod
    def generate_doc(html: str, url: str) -> DocumentHandle:
        if not html or not html.strip():
            raise ResourceError("No content, likely a bad response.")

        handle = DocumentHandle(html, url)
        if not handle.soup.find(True):
            raise ResourceError("No children, likely a bad parse.")

        normalize_meta_tags(handle.soup)
        convert_lazy_loaded_images(handle.soup)
        remove_comments(handle.soup)
        handle.refresh_meta_cache()
        return handle


def normalize_meta_tags(soup):
    """
    Give every meta tag a `name` and a `content`.

    Open Graph tags use `property`, some sites use `value`; copying them over
    lets every heuristic look tags up by name only.
    """
    for meta in soup.find_all('meta'):
        if not meta.get('name') and meta.get('property'):
            meta['name'] = meta['property']
        if meta.get('content') is None and meta.get('value') is not None:
            meta['content'] = meta['value']


def convert_lazy_loaded_images(soup):
    for img in soup.find_all('img'):
        for attr in LAZY_IMAGE_ATTRS:
            value = img.get(attr)
            if not value:
                continue
            if attr.endswith('srcset'):
                img['srcset'] = value
            elif not img.get('src') or img['src'].startswith('data:'):
                img['src'] = value


def remove_comments(soup):
    for comment in soup.find_all(string=lambda text: isinstance(text, Comment)):
        comment.extract()
