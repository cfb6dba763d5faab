"""
Response cache for fetched pages.

A small SQLite database keyed by URL hash. The resource layer consults it
before going to the network when caching is enabled, which makes repeated
parses of the same article (and its follow-up pages) cheap during
extractor development.
"""

import hashlib
import logging
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterator, List, Optional
from urllib.parse import urlparse

from sqlalchemy import Column, DateTime, Index, Integer, String, Text, create_engine, delete, func, select
from sqlalchemy.orm import Session, declarative_base, sessionmaker

import settings


logger = logging.getLogger(__name__)

Base = declarative_base()


class PageCache(Base):
    """One fetched page, or a redirect pointing at one."""

    __tablename__ = 'page_cache'

    id = Column(Integer, primary_key=True, autoincrement=True)
    url_hash = Column(String(64), unique=True, nullable=False, index=True)
    url = Column(Text, nullable=False)
    domain = Column(String(255), nullable=False, index=True)
    # Page HTML, or the target URL when status_code is a 30x
    body = Column(Text, nullable=False)
    status_code = Column(Integer, nullable=False, default=200)
    size = Column(Integer, nullable=False)
    fetched_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    last_hit_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index('idx_page_cache_domain_fetched', 'domain', 'fetched_at'),
    )

    @property
    def is_redirect(self) -> bool:
        return 300 <= self.status_code < 400

    def as_dict(self, with_content: bool = True) -> Dict:
        data = {
            'url': self.url,
            'url_hash': self.url_hash,
            'domain': self.domain,
            'status_code': self.status_code,
            'content_length': self.size,
            'created_at': self.fetched_at,
            'accessed_at': self.last_hit_at,
        }
        if with_content:
            data['content'] = self.body
        return data


class CacheDatabase:
    """SQLite store of downloaded pages."""

    def __init__(self, db_path: Optional[str] = None):
        """
        Args:
            db_path: SQLite file, created with its parent directories when
                missing. Defaults to the CACHE_DB_PATH setting. ":memory:"
                keeps the cache in memory.
        """
        db_path = db_path or settings.CACHE_DB_PATH
        if db_path != ':memory:':
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self.db_path = db_path
        self.engine = create_engine(f'sqlite:///{db_path}')
        Base.metadata.create_all(self.engine)
        self._sessions = sessionmaker(bind=self.engine, expire_on_commit=False)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Session committed on success and rolled back on error."""
        session = self._sessions()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    @staticmethod
    def compute_url_hash(url: str) -> str:
        return hashlib.sha256(url.encode('utf-8')).hexdigest()

    def _lookup(self, session: Session, url: str) -> Optional[PageCache]:
        return session.scalars(
            select(PageCache).where(PageCache.url_hash == self.compute_url_hash(url))
        ).first()

    def get_cached_content(self, url: str) -> Optional[Dict]:
        """
        Cached page for `url`, or None.

        A cached redirect is followed one hop; the result then carries
        "was_redirected" and "original_url".
        """
        with self.session() as session:
            entry = self._lookup(session, url)
            if entry is None:
                return None
            entry.last_hit_at = datetime.utcnow()

            if not entry.is_redirect:
                return entry.as_dict()

            target = self._lookup(session, entry.body)
            if target is None:
                return None
            target.last_hit_at = datetime.utcnow()

            data = target.as_dict()
            data.update(was_redirected=True, original_url=url)
            return data

    def save_to_cache(self, url: str, content: str, status_code: int = 200) -> bool:
        """
        Store a page, replacing any previous copy.

        For redirects pass the target URL as `content` and the 30x code.
        Returns False when the write fails.
        """
        try:
            with self.session() as session:
                entry = self._lookup(session, url)
                if entry is None:
                    entry = PageCache(
                        url_hash=self.compute_url_hash(url),
                        url=url,
                        domain=urlparse(url).netloc,
                    )
                    session.add(entry)
                entry.body = content
                entry.status_code = status_code
                entry.size = len(content)
                entry.last_hit_at = datetime.utcnow()
        except Exception as e:
            logger.warning("Could not cache %s: %s", url, e)
            return False
        return True

    def get_stats(self, domain: Optional[str] = None) -> Dict:
        """Entry count, total size, domains and the oldest/newest fetch time."""
        query = select(
            func.count(PageCache.id),
            func.coalesce(func.sum(PageCache.size), 0),
            func.min(PageCache.fetched_at),
            func.max(PageCache.fetched_at),
        )
        domains_query = select(PageCache.domain).distinct().order_by(PageCache.domain)
        if domain:
            query = query.where(PageCache.domain == domain)
            domains_query = domains_query.where(PageCache.domain == domain)

        with self.session() as session:
            count, size, oldest, newest = session.execute(query).one()
            domains = list(session.scalars(domains_query))

        return {
            'total_entries': count,
            'total_size_bytes': size,
            'domains': domains,
            'oldest_entry': oldest,
            'newest_entry': newest,
        }

    def list_entries(self, domain: Optional[str] = None, limit: int = 20) -> List[Dict]:
        """Most recently fetched entries first, without their content."""
        query = select(PageCache).order_by(PageCache.fetched_at.desc(), PageCache.id.desc())
        if domain:
            query = query.where(PageCache.domain == domain)
        if limit:
            query = query.limit(limit)

        with self.session() as session:
            return [entry.as_dict(with_content=False) for entry in session.scalars(query)]

    def get_domains(self) -> List[Dict]:
        query = select(
            PageCache.domain,
            func.count(PageCache.id),
            func.coalesce(func.sum(PageCache.size), 0),
        ).group_by(PageCache.domain)

        with self.session() as session:
            return [
                {'domain': name, 'count': count, 'total_size': size}
                for name, count, size in session.execute(query)
            ]

    def clear_cache(self, domain: Optional[str] = None) -> int:
        """Delete every entry, or those of one domain. Returns the number deleted."""
        statement = delete(PageCache)
        if domain:
            statement = statement.where(PageCache.domain == domain)

        with self.session() as session:
            return session.execute(statement).rowcount
