"""
Per-domain extractor definitions.

Each module is named after its domain (dots replaced by underscores) and
exposes an EXTRACTOR = ExtractorDefinition(...).
"""
