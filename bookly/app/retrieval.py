#!/usr/bin/env python3
"""
Retrieval module for the Bookly support backend.

This module fetches the order records and knowledge-base articles a support
query needs. Knowledge retrieval uses the Whoosh relevance index and falls
back to a substring search when the index cannot serve the query.
"""

from typing import List

from .config import Config
from ..data.store import SupportStore
from ..nlu.rules import ORDER_INTENTS
from ..schemas.io_models import ExtractedEntities, KnowledgeRetrieval, OrderRetrieval
from ..utils.errors import PersistenceError, SearchDegraded
from ..utils.logger import get_logger

logger = get_logger(__name__)

ORDER_LOOKUP = "OrderLookup"
ORDER_SEARCH = "OrderSearch"
KNOWLEDGE_SEARCH = "KnowledgeSearch"
KNOWLEDGE_REGEX_SEARCH = "KnowledgeRegexSearch"


def extract_keywords(query: str, max_keywords: int = None, min_length: int = None) -> List[str]:
    """Whitespace tokens strictly longer than `min_length`, first `max_keywords` of them."""
    max_keywords = Config.MAX_KEYWORDS if max_keywords is None else max_keywords
    min_length = Config.MIN_KEYWORD_LENGTH if min_length is None else min_length
    return [word for word in (query or "").split() if len(word) > min_length][:max_keywords]


class SupportRetriever:
    """Order and knowledge retrieval over a SupportStore."""

    def __init__(self, store: SupportStore, max_orders: int = None, max_articles: int = None):
        self.store = store
        self.max_orders = max_orders or Config.MAX_ORDER_RESULTS
        self.max_articles = max_articles or Config.MAX_KNOWLEDGE_RESULTS

    def retrieve_orders(self, intent: str, entities: ExtractedEntities) -> OrderRetrieval:
        """
        Fetch orders for order-related intents.

        An order id wins over an email. With neither, nothing is fetched.
        Store failures propagate as PersistenceError.
        """
        if intent not in ORDER_INTENTS:
            return OrderRetrieval()

        if entities.order_id:
            order = self.store.find_order_by_id(entities.order_id)
            if order is None:
                logger.info(f"[WORKFLOW] 4a. No order found for {entities.order_id}")
                return OrderRetrieval()
            logger.info(f"[WORKFLOW] 4a. Found order: {entities.order_id}")
            return OrderRetrieval(orders=[order], single=True, tools=[ORDER_LOOKUP])

        if entities.email:
            orders = self.store.find_orders_by_email(entities.email, limit=self.max_orders)
            if not orders:
                return OrderRetrieval()
            logger.info(f"[WORKFLOW] 4a. Found {len(orders)} orders for customer")
            return OrderRetrieval(orders=list(orders), tools=[ORDER_SEARCH])

        return OrderRetrieval()

    def retrieve_knowledge(self, query: str) -> KnowledgeRetrieval:
        """
        Fetch up to `max_articles` knowledge articles for the raw query.

        Relevance search first; on SearchDegraded the substring fallback runs
        instead (never both). Fallback failures propagate.
        """
        keywords = extract_keywords(query)
        if not keywords:
            logger.info("[WORKFLOW] 4b. No usable keywords, skipping knowledge search")
            return KnowledgeRetrieval()

        return self.search_knowledge(" ".join(keywords), keywords)

    def search_knowledge(self, phrase: str, tokens: List[str], limit: int = None, category=None) -> KnowledgeRetrieval:
        """Relevance search for `phrase`, or substring search on `tokens` when degraded."""
        limit = limit or self.max_articles
        try:
            articles = self.store.search_knowledge(phrase, limit, category=category)
            tool = KNOWLEDGE_SEARCH
            degraded = False
        except SearchDegraded as e:
            logger.warning(f"[WORKFLOW] 4b. Text search not available ({e}), using substring fallback")
            articles = self.store.search_knowledge_fallback(tokens, limit, category=category)
            tool = KNOWLEDGE_REGEX_SEARCH
            degraded = True

        articles = list(articles)
        if articles:
            logger.info(f"[WORKFLOW] 4b. Found {len(articles)} knowledge articles via {tool}")

        return KnowledgeRetrieval(
            articles=articles,
            keywords=list(tokens),
            degraded=degraded,
            tools=[tool] if articles else [],
        )

    def record_views(self, articles) -> None:
        """Count one view per article. A failed increment is logged, never raised.

        Each increment commits the session and expires loaded rows, so call
        this only once the rows have been rendered.
        """
        for article_id in [article.id for article in articles]:
            try:
                self.store.increment_views(article_id)
            except PersistenceError as e:
                logger.warning(f"Could not increment views for article {article_id}: {e.details or e}")
