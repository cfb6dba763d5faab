"""
Generic extractor: infers every article field from page structure alone.

Used for pages without a per-domain definition and, field by field, for
whatever a definition leaves out.
"""

from .content import extract_content
from .fields import (
    content_text,
    extract_author,
    extract_date_published,
    extract_dek,
    extract_direction,
    extract_excerpt,
    extract_lead_image_url,
    extract_title,
    extract_word_count,
)
from .next_page_url import article_base_url, extract_next_page_url


class GenericExtractor:
    """One heuristic per output field, all taking (handle, url, **context)."""

    domain = '*'

    title = staticmethod(extract_title)
    author = staticmethod(extract_author)
    date_published = staticmethod(extract_date_published)
    dek = staticmethod(extract_dek)
    lead_image_url = staticmethod(extract_lead_image_url)
    content = staticmethod(extract_content)
    next_page_url = staticmethod(extract_next_page_url)
    excerpt = staticmethod(extract_excerpt)
    word_count = staticmethod(extract_word_count)
    direction = staticmethod(extract_direction)

    @classmethod
    def for_field(cls, field_name):
        return getattr(cls, field_name)


__all__ = ['GenericExtractor', 'article_base_url', 'content_text']
