"""
Database package for article-parser.
"""

from .cache import Base, PageCache, CacheDatabase

__all__ = ['Base', 'PageCache', 'CacheDatabase']
