"""
Resource layer: downloads pages and turns them into queryable documents.
"""

from .document import DocumentHandle, HandleConsumedError
from .http import ResourceError, download_html
from .resource import Resource

__all__ = ['DocumentHandle', 'HandleConsumedError', 'ResourceError', 'download_html', 'Resource']
