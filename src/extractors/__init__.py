"""
Article extractors.

Per-domain definitions live in extractors/custom/, one module per site,
each exposing an EXTRACTOR. Pages without a definition, and fields a
definition leaves out, go through the generic extractor.
"""

from .all import load_built_in_extractors
from .base import FIELDS, ExtractorDefinition, FieldRule
from .generic import GenericExtractor
from .registry import ExtractorRegistry


# Process-wide registry shared by the library API and the CLI
extractor_registry = ExtractorRegistry(load_built_in_extractors())


def get_extractor(url):
    """Definition that applies to `url`, or None."""
    return extractor_registry.resolve(url)


def add_extractor(definition):
    """
    Register a custom definition for its domain and supported domains.

    Accepts an ExtractorDefinition or a mapping in the same shape.

    Returns:
        The updated custom mapping, or an error record when the definition
        is not usable.
    """
    if isinstance(definition, ExtractorDefinition):
        return extractor_registry.add(definition)

    if not isinstance(definition, dict) or not definition.get('domain'):
        return {"error": True, "message": "Unable to add custom extractor. Invalid parameters."}

    try:
        definition = ExtractorDefinition.from_dict(definition)
    except (TypeError, ValueError) as e:
        return {"error": True, "message": f"Unable to add custom extractor. {e}"}
    return extractor_registry.add(definition)


__all__ = [
    'FIELDS',
    'ExtractorDefinition',
    'ExtractorRegistry',
    'FieldRule',
    'GenericExtractor',
    'add_extractor',
    'get_extractor',
    'extractor_registry',
]
