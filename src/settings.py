"""
Runtime configuration for article-parser.

Values come from the environment, with a `.env` file at the project root
loaded first through python-dotenv. Every knob is read once at import
time; tests monkeypatch the module attributes directly.
"""

import logging
import os
from pathlib import Path
from dotenv import load_dotenv

env_path = Path(__file__).parent.parent / '.env'
load_dotenv(dotenv_path=env_path)

_resolved = {}


def get_setting(key: str, default=None):
    """
    Look up `key` in the environment, falling back to `default`.

    The first lookup of a key is memoized so later changes to os.environ
    do not shift values under a running parse.

    Example:
        >>> MAX_PAGES = int(get_setting('ARTICLE_PARSER_MAX_PAGES', '25'))
    """
    if key not in _resolved:
        _resolved[key] = os.getenv(key, default)
    return _resolved[key]


def get_bool(key: str, default: bool = False) -> bool:
    value = get_setting(key)
    if value is None:
        return default
    return str(value).strip().lower() in ('true', '1', 'yes', 'on')


# Fetching
USER_AGENT = get_setting(
    'ARTICLE_PARSER_USER_AGENT',
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
)
REQUEST_TIMEOUT = int(get_setting('ARTICLE_PARSER_TIMEOUT', '10'))
MAX_CONTENT_LENGTH = int(get_setting('ARTICLE_PARSER_MAX_CONTENT_LENGTH', str(5 * 1024 * 1024)))

# Pagination upper bound, counted in pages including the first one
MAX_PAGES = int(get_setting('ARTICLE_PARSER_MAX_PAGES', '25'))

# Response cache
USE_CACHE = get_bool('ARTICLE_PARSER_USE_CACHE')
CACHE_DB_PATH = get_setting('CACHE_DB_PATH', 'data/cache.db')

DEBUG = get_bool('DEBUG')
LOG_LEVEL = get_setting('LOG_LEVEL', 'DEBUG' if DEBUG else 'WARNING')


def setup_logging(level=None):
    """Configure root logging for command line usage."""
    level = level or LOG_LEVEL
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # urllib3 is very chatty at DEBUG
    logging.getLogger("urllib3").setLevel(logging.DEBUG if DEBUG else logging.WARNING)
