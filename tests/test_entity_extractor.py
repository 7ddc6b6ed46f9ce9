#!/usr/bin/env python3
"""
Unit tests for the rule-based entity extractor.

TEST COVERAGE:
    - Email extraction
    - Order identifier extraction and normalization
    - Queries with no entities
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from bookly.nlu.entity_extractor import EntityExtractor


class TestEntityExtractor(unittest.TestCase):

    def setUp(self):
        self.extractor = EntityExtractor()

    def test_extracts_email(self):
        entities = self.extractor.extract("My email is Jane.Doe+books@Example.co.uk, any orders?")
        self.assertEqual(entities.email, "Jane.Doe+books@Example.co.uk")
        self.assertIsNone(entities.order_id)

    def test_extracts_order_id_uppercased(self):
        self.assertEqual(self.extractor.extract_order_id("where is ord-54321 now"), "ORD-54321")

    def test_first_order_id_wins(self):
        self.assertEqual(self.extractor.extract_order_id("ORD-1 or ORD-2?"), "ORD-1")

    def test_order_id_inside_longer_token(self):
        self.assertEqual(self.extractor.extract_order_id("ref XORD-777."), "ORD-777")

    def test_prefix_without_digits_is_not_an_order_id(self):
        self.assertIsNone(self.extractor.extract_order_id("my ORD- number got lost"))

    def test_both_entities(self):
        entities = self.extractor.extract("ORD-12345 placed by bob@mail.test")
        self.assertEqual(entities.order_id, "ORD-12345")
        self.assertEqual(entities.email, "bob@mail.test")

    def test_nothing_found(self):
        entities = self.extractor.extract("hello there")
        self.assertIsNone(entities.email)
        self.assertIsNone(entities.order_id)

    def test_empty_text(self):
        entities = self.extractor.extract("")
        self.assertIsNone(entities.email)
        self.assertIsNone(entities.order_id)


if __name__ == '__main__':
    unittest.main()
