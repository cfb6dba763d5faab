"""
Parsed document handle shared by the extractors.
"""

from typing import List, Optional
from urllib.parse import urlparse

from bs4 import BeautifulSoup


class HandleConsumedError(RuntimeError):
    """Raised when a document handle is handed to a second extraction."""


class DocumentHandle:
    """
    A parsed page owned by exactly one extraction.

    Holds the BeautifulSoup tree, the raw markup it was built from, the page
    URL and the names of every <meta> tag present. Content cleaning mutates
    the tree, so an extraction calls consume() first and the handle cannot be
    reused for another extraction afterwards.
    """

    def __init__(self, html: str, url: str, parser: str = 'lxml'):
        self.html = html
        self.url = url
        self.parsed_url = urlparse(url)
        self.soup = BeautifulSoup(html, parser)
        self.meta_cache = self._build_meta_cache()
        self._consumed = False

    def _build_meta_cache(self) -> List[str]:
        return [meta.get('name') for meta in self.soup.find_all('meta') if meta.get('name')]

    def refresh_meta_cache(self):
        self.meta_cache = self._build_meta_cache()

    @property
    def consumed(self) -> bool:
        return self._consumed

    def consume(self):
        """Claim the handle for an extraction."""
        if self._consumed:
            raise HandleConsumedError(f"Document for {self.url} was already extracted")
        self._consumed = True

    def select(self, selector: str):
        return self.soup.select(selector)

    def meta_content(self, names) -> Optional[str]:
        """
        Return the content of the first meta tag, in `names` order, that is
        present in the document and carries a non-empty value.
        """
        for name in names:
            if name not in self.meta_cache:
                continue
            for meta in self.soup.find_all('meta', attrs={'name': name}):
                value = (meta.get('content') or meta.get('value') or '').strip()
                if value:
                    return value
        return None

    def text(self) -> str:
        return self.soup.get_text(' ', strip=True)
