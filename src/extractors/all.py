"""
Built-in extractor definitions.

Every module in extractors/custom/ exposing an EXTRACTOR attribute
contributes one definition, registered under its domain and each supported
domain.
"""

import importlib
import logging
import pkgutil
from typing import Dict

from . import custom
from .base import ExtractorDefinition


logger = logging.getLogger(__name__)


def load_built_in_extractors() -> Dict[str, ExtractorDefinition]:
    extractors = {}
    for module_info in sorted(pkgutil.iter_modules(custom.__path__), key=lambda m: m.name):
        module = importlib.import_module(f'{custom.__name__}.{module_info.name}')
        definition = getattr(module, 'EXTRACTOR', None)
        if not isinstance(definition, ExtractorDefinition):
            logger.debug("Module %s has no EXTRACTOR, skipping", module_info.name)
            continue
        for domain in definition.domains:
            extractors[domain] = definition
    return extractors
