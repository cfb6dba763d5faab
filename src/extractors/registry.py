"""
Extractor lookup by URL.
"""

import logging
import re
import threading
from types import MappingProxyType
from typing import Dict, Mapping, Optional
from urllib.parse import urlparse

from .base import ExtractorDefinition


logger = logging.getLogger(__name__)


def _path_matches(pattern: str, url: str, url_path: str) -> bool:
    # Patterns anchored with "^" are written against the path, not the full URL
    return bool(re.search(pattern, url) or re.search(pattern, url_path))


class ExtractorRegistry:
    """
    Built-in definitions plus definitions registered at runtime.

    Custom keys are scanned before built-in keys, so a custom definition
    shadows a built-in one for the same domain. Registration is serialized
    by a lock and lookups work on a snapshot, so both can happen from
    different threads or tasks.
    """

    def __init__(self, built_in: Optional[Mapping[str, ExtractorDefinition]] = None):
        self._built_in = MappingProxyType(dict(built_in or {}))
        self._custom: Dict[str, ExtractorDefinition] = {}
        self._lock = threading.Lock()

    @property
    def built_in(self) -> Mapping[str, ExtractorDefinition]:
        return self._built_in

    @property
    def custom(self) -> Mapping[str, ExtractorDefinition]:
        with self._lock:
            return MappingProxyType(dict(self._custom))

    def add(self, definition: ExtractorDefinition) -> Mapping[str, ExtractorDefinition]:
        """Register `definition` under its domain and supported domains."""
        with self._lock:
            for domain in definition.domains:
                self._custom[domain] = definition
            snapshot = dict(self._custom)
        logger.debug("Registered custom extractor for %s", ", ".join(definition.domains))
        return MappingProxyType(snapshot)

    def clear_custom(self):
        with self._lock:
            self._custom.clear()

    def resolve(self, url: str) -> Optional[ExtractorDefinition]:
        """
        Find the definition for `url`.

        Keys are matched as substrings of the URL, so "example.com" also
        matches "notexample.com". A key whose definition declares
        included_paths only matches when one of the patterns is found in the
        URL; otherwise scanning continues with the next key.
        """
        with self._lock:
            custom = dict(self._custom)

        candidates = [(key, custom[key]) for key in custom]
        candidates += [(key, self._built_in[key]) for key in self._built_in]

        url_path = urlparse(url).path
        for key, definition in candidates:
            if key not in url:
                continue
            if not definition.included_paths:
                return definition
            if any(_path_matches(path, url, url_path) for path in definition.included_paths):
                return definition
            logger.debug("Extractor %s matched domain but no included path for %s", key, url)

        return None
