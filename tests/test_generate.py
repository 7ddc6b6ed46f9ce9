#!/usr/bin/env python3
"""
Unit tests for the Gemini generation client.

The HTTP session is a Mock; nothing leaves the process.

TEST COVERAGE:
    - Request shape (URL, key header, timeout)
    - Answer extraction
    - Timeout, transport and upstream errors
    - Missing credential
"""

import os
import sys
import unittest
from unittest.mock import Mock

import requests

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from bookly.app.generate import GenerationClient
from bookly.utils.errors import ConfigurationError, GenerationTimeoutError, ProviderError


def _response(status_code=200, body=None, text=""):
    response = Mock(status_code=status_code, text=text)
    if body is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = body
    return response


class TestGenerationClient(unittest.TestCase):

    def setUp(self):
        self.session = Mock()
        self.client = GenerationClient(api_key="test-key", model="test-model", timeout=5, session=self.session)

    def test_generate_answer(self):
        self.session.post.return_value = _response(body={
            "candidates": [{"content": {"parts": [{"text": "Your order "}, {"text": "has shipped."}]}}]
        })

        answer = self.client.generate_answer("PROMPT")

        self.assertEqual(answer, "Your order has shipped.")
        args, kwargs = self.session.post.call_args
        self.assertTrue(args[0].endswith("/test-model:generateContent"))
        self.assertEqual(kwargs["headers"], {"x-goog-api-key": "test-key"})
        self.assertEqual(kwargs["timeout"], 5)
        self.assertEqual(kwargs["json"]["contents"][0]["parts"][0]["text"], "PROMPT")

    def test_tool_name(self):
        self.assertEqual(self.client.tool_name, "Gemini:test-model")

    def test_missing_key(self):
        client = GenerationClient(api_key="", session=self.session)
        self.assertFalse(client.is_configured())
        with self.assertRaises(ConfigurationError):
            client.generate_answer("PROMPT")
        self.session.post.assert_not_called()

    def test_timeout(self):
        self.session.post.side_effect = requests.exceptions.Timeout("read timed out")
        with self.assertRaises(GenerationTimeoutError) as ctx:
            self.client.generate_answer("PROMPT")
        self.assertEqual(ctx.exception.status_code, 504)

    def test_connection_error(self):
        self.session.post.side_effect = requests.exceptions.ConnectionError("refused")
        with self.assertRaises(ProviderError) as ctx:
            self.client.generate_answer("PROMPT")
        self.assertNotIsInstance(ctx.exception, GenerationTimeoutError)

    def test_upstream_error_message(self):
        self.session.post.return_value = _response(
            status_code=429, body={"error": {"message": "Quota exceeded"}}, text="..."
        )
        with self.assertRaises(ProviderError) as ctx:
            self.client.generate_answer("PROMPT")
        self.assertEqual(ctx.exception.details, "Quota exceeded")
        self.assertIn("429", str(ctx.exception))

    def test_upstream_error_without_json(self):
        self.session.post.return_value = _response(status_code=502, text="Bad Gateway")
        with self.assertRaises(ProviderError) as ctx:
            self.client.generate_answer("PROMPT")
        self.assertEqual(ctx.exception.details, "Bad Gateway")

    def test_non_json_success(self):
        self.session.post.return_value = _response(status_code=200, text="<html>")
        with self.assertRaises(ProviderError):
            self.client.generate_answer("PROMPT")

    def test_blocked_prompt(self):
        self.session.post.return_value = _response(body={"promptFeedback": {"blockReason": "SAFETY"}})
        with self.assertRaises(ProviderError) as ctx:
            self.client.generate_answer("PROMPT")
        self.assertEqual(ctx.exception.details, "SAFETY")


if __name__ == '__main__':
    unittest.main()
