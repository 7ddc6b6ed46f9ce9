#!/usr/bin/env python3
"""
Full-text relevance index over knowledge-base articles.

Articles live in the SQL database; this module keeps a Whoosh (BM25F) index of
their title, content and keywords so support queries can be ranked by text
relevance. The index only stores article ids and priority; callers load the
rows from the database.
"""

import os
from typing import Iterable, List, Tuple

from whoosh import index as whoosh_index
from whoosh.fields import Schema, TEXT, ID, KEYWORD, NUMERIC
from whoosh.qparser import MultifieldParser, OrGroup, WildcardPlugin
from whoosh.writing import AsyncWriter

from ..app.config import Config
from ..utils.errors import SearchDegraded
from ..utils.logger import get_logger

logger = get_logger(__name__)

SEARCH_FIELDS = ["title", "content", "keywords"]

SCHEMA = Schema(
    id=ID(stored=True, unique=True),
    title=TEXT(field_boost=2.0),
    content=TEXT,
    keywords=KEYWORD(lowercase=True, commas=True, scorable=True),
    priority=NUMERIC(stored=True),
)


class KnowledgeIndex:
    """Whoosh index of knowledge articles, ranked by relevance then priority."""

    def __init__(self, index_dir: str = None):
        self.index_dir = index_dir or Config.WHOOSH_INDEX_PATH
        self._index = None

    def _open(self):
        if self._index is None:
            if not os.path.isdir(self.index_dir) or not whoosh_index.exists_in(self.index_dir):
                raise SearchDegraded(f"No knowledge index found at {self.index_dir}")
            try:
                self._index = whoosh_index.open_dir(self.index_dir)
            except Exception as e:
                raise SearchDegraded(f"Knowledge index at {self.index_dir} could not be opened: {e}") from e
        return self._index

    @property
    def available(self) -> bool:
        try:
            self._open()
            return True
        except SearchDegraded:
            return False

    @staticmethod
    def _document(article) -> dict:
        return {
            "id": str(article.id),
            "title": article.title or "",
            "content": article.content or "",
            "keywords": ",".join(article.keywords or []),
            "priority": int(article.priority or 1),
        }

    def rebuild(self, articles: Iterable) -> int:
        """Recreate the index from scratch and return the number of documents."""
        os.makedirs(self.index_dir, exist_ok=True)
        ix = whoosh_index.create_in(self.index_dir, SCHEMA)
        writer = ix.writer()
        count = 0
        for article in articles:
            writer.add_document(**self._document(article))
            count += 1
        writer.commit()
        self._index = ix
        logger.info(f"Knowledge index rebuilt with {count} articles at {self.index_dir}")
        return count

    def upsert(self, article) -> bool:
        """Add or replace one article. Returns False when there is no index yet."""
        try:
            ix = self._open()
        except SearchDegraded as e:
            logger.warning(f"Skipping index update for article {article.id}: {e}")
            return False
        writer = AsyncWriter(ix)
        writer.update_document(**self._document(article))
        writer.commit()
        return True

    def remove(self, article_id: int) -> bool:
        try:
            ix = self._open()
        except SearchDegraded as e:
            logger.warning(f"Skipping index removal for article {article_id}: {e}")
            return False
        writer = AsyncWriter(ix)
        writer.delete_by_term("id", str(article_id))
        writer.commit()
        return True

    def search(self, text: str, limit: int) -> List[Tuple[int, float]]:
        """
        Search the index.

        Args:
            text: Free-text search phrase; terms are OR-ed
            limit: Maximum number of results

        Returns:
            List of (article_id, score), best score first, ties broken by
            higher priority

        Raises:
            SearchDegraded: index missing or the query could not be run
        """
        ix = self._open()
        try:
            parser = MultifieldParser(SEARCH_FIELDS, ix.schema, group=OrGroup)
            parser.remove_plugin_class(WildcardPlugin)
            query = parser.parse(text)
            with ix.searcher() as searcher:
                hits = searcher.search(query, limit=None)
                ranked = [(int(hit["id"]), hit.score, hit["priority"]) for hit in hits]
        except Exception as e:
            raise SearchDegraded(f"Knowledge relevance search failed: {e}") from e

        ranked.sort(key=lambda r: (-r[1], -r[2]))
        return [(article_id, score) for article_id, score, _ in ranked[:limit]]
