#!/usr/bin/env python3
"""
Tests for the small helpers: PII masking, error types and sample data.
"""

import os
import random
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from bookly.data.models import OrderStatus
from bookly.data.populate_db import KNOWLEDGE_ARTICLES, generate_orders
from bookly.utils.errors import GenerationTimeoutError, InputError, ProviderError, SupportError
from bookly.utils.security import mask_pii


class TestMaskPii(unittest.TestCase):

    def test_masks_email(self):
        self.assertEqual(mask_pii("I am jane.doe@example.com"), "I am j***@example.com")

    def test_redacts_long_numbers(self):
        self.assertEqual(mask_pii("card 4111111111111111"), "card [REDACTED]")

    def test_leaves_order_ids(self):
        self.assertEqual(mask_pii("Where is ORD-54321?"), "Where is ORD-54321?")

    def test_empty(self):
        self.assertEqual(mask_pii(""), "")
        self.assertIsNone(mask_pii(None))


class TestErrors(unittest.TestCase):

    def test_default_message(self):
        self.assertEqual(str(SupportError()), "Internal server error during query processing")
        self.assertEqual(str(InputError()), "Query is required")

    def test_timeout_is_provider_error(self):
        err = GenerationTimeoutError("slow", details="read timeout")
        self.assertIsInstance(err, ProviderError)
        self.assertEqual(err.status_code, 504)
        self.assertEqual(err.details, "read timeout")


class TestSampleData(unittest.TestCase):

    def test_generate_orders(self):
        orders = generate_orders(50, rng=random.Random(7))
        self.assertEqual(len(orders), 50)
        self.assertEqual(len({o.order_id for o in orders}), 50)
        for order in orders:
            self.assertRegex(order.order_id, r"^ORD-\d+$")
            self.assertTrue(order.items)
            if order.tracking_number:
                self.assertIn(order.status, (OrderStatus.shipped, OrderStatus.delivered))

    def test_every_category_has_an_article(self):
        categories = {article["category"].value for article in KNOWLEDGE_ARTICLES}
        self.assertEqual(categories, {"shipping", "returns", "payment", "account", "products", "general"})


if __name__ == '__main__':
    unittest.main()
