#!/usr/bin/env python3
"""
Database integration tests for SupportStore and the analytics queries.

Runs against an in-memory SQLite database per test.

TEST COVERAGE:
    - Order lookups by id and by email
    - Order listing filters, sorting and paging
    - Unique order ids
    - Knowledge relevance search and the substring fallback
    - Counter updates
    - Aggregate statistics
"""

import os
import shutil
import sys
import tempfile
import unittest
from datetime import datetime

from sqlalchemy import delete

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from bookly.data import analytics
from bookly.data.knowledge_index import KnowledgeIndex
from bookly.data.models import KnowledgeArticle, KnowledgeCategory, OrderStatus
from bookly.data.store import SupportStore
from bookly.schemas.order_models import OrderQuery
from bookly.utils.errors import InvalidOperation, PersistenceError, SearchDegraded
from db_support import make_article, make_order, make_session_factory


class StoreTestCase(unittest.TestCase):

    def setUp(self):
        self.db = make_session_factory()()
        self.store = SupportStore(self.db)

    def tearDown(self):
        self.db.close()


class TestOrderQueries(StoreTestCase):

    def setUp(self):
        super().setUp()
        self.db.add_all([
            make_order(order_id="ORD-1", customer_email="Jane@Example.com", status=OrderStatus.delivered,
                       order_date=datetime(2025, 1, 1), total_amount=10.0),
            make_order(order_id="ORD-2", customer_email="jane@example.com", status=OrderStatus.shipped,
                       order_date=datetime(2025, 3, 1), total_amount=20.0),
            make_order(order_id="ORD-3", customer_email="jane@example.com", status=OrderStatus.pending,
                       order_date=datetime(2025, 2, 1), total_amount=30.0),
            make_order(order_id="ORD-4", customer_email="jane@example.com", status=OrderStatus.pending,
                       order_date=datetime(2024, 12, 1), total_amount=40.0),
            make_order(order_id="ORD-5", customer_email="bob@mail.test", status=OrderStatus.cancelled,
                       order_date=datetime(2025, 4, 1), total_amount=5.0),
        ])
        self.db.commit()

    def test_find_order_by_id(self):
        order = self.store.find_order_by_id("ord-2")
        self.assertIsNotNone(order)
        self.assertEqual(order.order_id, "ORD-2")
        self.assertIsNone(self.store.find_order_by_id("ORD-999"))

    def test_email_stored_lowercase(self):
        self.assertEqual(self.store.find_order_by_id("ORD-1").customer_email, "jane@example.com")

    def test_find_orders_by_email_newest_first(self):
        orders = self.store.find_orders_by_email("JANE@example.com", limit=3)
        self.assertEqual([o.order_id for o in orders], ["ORD-2", "ORD-3", "ORD-1"])

    def test_find_orders_by_email_no_match(self):
        self.assertEqual(self.store.find_orders_by_email("nobody@example.com", limit=3), [])

    def test_list_orders_filters(self):
        orders, total = self.store.list_orders(OrderQuery(email_contains="JANE", status=OrderStatus.pending))
        self.assertEqual(total, 2)
        self.assertEqual([o.order_id for o in orders], ["ORD-3", "ORD-4"])

    def test_list_orders_date_range(self):
        orders, _ = self.store.list_orders(
            OrderQuery(from_date=datetime(2025, 1, 15), to_date=datetime(2025, 3, 15), sort="order_date")
        )
        self.assertEqual([o.order_id for o in orders], ["ORD-3", "ORD-2"])

    def test_list_orders_paging(self):
        orders, total = self.store.list_orders(OrderQuery(limit=2, skip=1))
        self.assertEqual(total, 5)
        self.assertEqual([o.order_id for o in orders], ["ORD-2", "ORD-3"])

    def test_list_orders_id_substring(self):
        orders, total = self.store.list_orders(OrderQuery(order_id_contains="ord-5"))
        self.assertEqual(total, 1)
        self.assertEqual(orders[0].customer_email, "bob@mail.test")

    def test_unknown_sort_field_rejected(self):
        with self.assertRaises(ValueError):
            OrderQuery(sort="-shipping_address")

    def test_duplicate_order_id(self):
        with self.assertRaises(InvalidOperation):
            self.store.save(make_order(order_id="ORD-1"))
        # session still usable after the rollback
        self.assertIsNotNone(self.store.find_order_by_id("ORD-1"))

    def test_order_overview(self):
        overview = analytics.order_overview(self.db)
        self.assertEqual(overview["totalOrders"], 5)
        by_status = {row["_id"]: row for row in overview["byStatus"]}
        self.assertEqual(by_status["pending"]["count"], 2)
        self.assertEqual(by_status["pending"]["totalAmount"], 70.0)

    def test_top_customers(self):
        customers = analytics.top_customers(self.db)
        self.assertEqual(customers[0]["_id"], "jane@example.com")
        self.assertEqual(customers[0]["orderCount"], 4)
        self.assertEqual(customers[0]["totalSpent"], 100.0)

    def test_orders_trend(self):
        trend = analytics.orders_trend(self.db, days=45, now=datetime(2025, 4, 10))
        self.assertEqual(trend, [{"_id": "2025-03-01", "count": 1}, {"_id": "2025-04-01", "count": 1}])


class TestKnowledgeQueries(StoreTestCase):

    def setUp(self):
        super().setUp()
        self.index_dir = tempfile.mkdtemp()
        self.db.add_all([
            make_article(title="Shipping Times", content="Standard shipping takes 5-7 business days.", priority=5),
            make_article(title="Express Delivery", content="Express shipping takes 2-3 days.", priority=9),
            make_article(category=KnowledgeCategory.returns, title="Return Policy",
                         content="Returns are accepted within 30 days.", keywords=["return"], priority=7),
        ])
        self.db.commit()

    def tearDown(self):
        shutil.rmtree(self.index_dir, ignore_errors=True)
        super().tearDown()

    def _indexed_store(self):
        index = KnowledgeIndex(os.path.join(self.index_dir, "knowledge"))
        index.rebuild(self.db.query(KnowledgeArticle).all())
        return SupportStore(self.db, index)

    def test_search_without_index(self):
        with self.assertRaises(SearchDegraded):
            self.store.search_knowledge("shipping", 3)

    def test_search_with_index(self):
        store = self._indexed_store()
        titles = [a.title for a in store.search_knowledge("shipping", 3)]
        self.assertEqual(set(titles), {"Shipping Times", "Express Delivery"})

    def test_search_with_category(self):
        store = self._indexed_store()
        articles = store.search_knowledge("days", 3, category=KnowledgeCategory.returns)
        self.assertEqual([a.title for a in articles], ["Return Policy"])

    def test_search_skips_rows_deleted_since_rebuild(self):
        store = self._indexed_store()
        store.delete(self.db.query(KnowledgeArticle).filter_by(title="Return Policy").one())
        self.assertEqual(store.search_knowledge("returns accepted", 3), [])

    def test_fallback_substring_match(self):
        articles = self.store.search_knowledge_fallback(["EXPRESS"], 3)
        self.assertEqual([a.title for a in articles], ["Express Delivery"])

    def test_fallback_any_token(self):
        articles = self.store.search_knowledge_fallback(["express", "returns"], 3)
        self.assertEqual({a.title for a in articles}, {"Express Delivery", "Return Policy"})

    def test_fallback_is_literal(self):
        self.assertEqual(self.store.search_knowledge_fallback(["5-7%"], 3), [])
        self.assertEqual(self.store.search_knowledge_fallback(["ship.ing"], 3), [])

    def test_fallback_limit(self):
        self.assertEqual(len(self.store.search_knowledge_fallback(["takes", "days"], 1)), 1)

    def test_list_articles_by_priority(self):
        self.assertEqual(
            [a.title for a in self.store.list_articles()],
            ["Express Delivery", "Return Policy", "Shipping Times"],
        )
        self.assertEqual(len(self.store.list_articles(KnowledgeCategory.returns)), 1)

    def test_counters(self):
        article = self.store.list_articles(KnowledgeCategory.returns)[0]
        self.store.increment_views(article.id)
        self.store.increment_views(article.id)
        self.store.mark_helpful(article.id)

        refreshed = self.store.get_article(article.id)
        self.assertEqual(refreshed.views, 2)
        self.assertEqual(refreshed.helpful_count, 1)

    def test_refresh_after_counter_update(self):
        article = self.store.list_articles(KnowledgeCategory.returns)[0]
        self.store.increment_views(article.id)
        self.assertEqual(self.store.refresh(article).views, 1)

    def test_refresh_failure_is_persistence_error(self):
        article = self.store.list_articles(KnowledgeCategory.returns)[0]
        self.db.execute(delete(KnowledgeArticle).execution_options(synchronize_session=False))
        self.db.commit()
        with self.assertRaises(PersistenceError):
            self.store.refresh(article)

    def test_dashboard(self):
        self.db.add(make_order())
        self.db.commit()

        data = analytics.dashboard(self.db)
        self.assertEqual(data["orders"]["total"], 1)
        self.assertEqual(data["orders"]["recent"][0]["order_id"], "ORD-54321")
        self.assertEqual(data["knowledge"]["total"], 3)
        by_category = {row["_id"]: row["count"] for row in data["knowledge"]["byCategory"]}
        self.assertEqual(by_category, {"shipping": 2, "returns": 1})
        self.assertEqual(len(data["knowledge"]["topArticles"]), 3)


if __name__ == '__main__':
    unittest.main()
