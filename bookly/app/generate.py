#!/usr/bin/env python3
"""
Generation module for the Bookly support backend.

This module handles answer generation using the Gemini LLM API.
"""

import requests

from .config import Config
from ..utils.errors import ConfigurationError, GenerationTimeoutError, ProviderError
from ..utils.logger import get_logger

logger = get_logger(__name__)


class GenerationClient:
    """Client for generating answers using Gemini LLM API."""

    def __init__(self, api_key: str = None, model: str = None, timeout: float = None, session=None):
        """Initialize the generation client.

        The key is resolved per call (explicit key first, then Config) so a
        missing key is reported on use rather than at startup.
        """
        self._api_key = api_key
        self.llm_model = model or Config.GEMINI_MODEL
        self.timeout = timeout or Config.GENERATION_TIMEOUT_SECONDS
        self.http = session or requests

    @property
    def api_key(self):
        return self._api_key if self._api_key is not None else Config.GEMINI_API_KEY

    @property
    def api_url(self) -> str:
        return f"{Config.GEMINI_API_BASE}/{self.llm_model}:generateContent"

    @property
    def tool_name(self) -> str:
        return f"Gemini:{self.llm_model}"

    def is_configured(self) -> bool:
        return bool(self.api_key)

    def ensure_configured(self) -> None:
        if not self.is_configured():
            raise ConfigurationError("GEMINI_API_KEY is not configured")

    @staticmethod
    def _upstream_message(response) -> str:
        try:
            return response.json()["error"]["message"]
        except (ValueError, KeyError, TypeError):
            return response.text[:500]

    def generate_answer(self, prompt: str) -> str:
        """
        Generate an answer using the Gemini LLM.

        Args:
            prompt: Formatted prompt for the LLM

        Returns:
            Generated answer text

        Raises:
            ConfigurationError: no API key
            GenerationTimeoutError: no answer within the configured timeout
            ProviderError: any other upstream failure, not retried
        """
        self.ensure_configured()
        logger.info(f"[WORKFLOW] 6. Calling Gemini ({self.llm_model}), prompt length: {len(prompt)}")

        payload = {
            "contents": [
                {
                    "parts": [
                        {
                            "text": prompt
                        }
                    ]
                }
            ],
            "generationConfig": {
                "temperature": Config.GENERATION_TEMPERATURE,
                "maxOutputTokens": Config.GENERATION_MAX_OUTPUT_TOKENS,
            }
        }

        try:
            response = self.http.post(
                self.api_url,
                headers={"x-goog-api-key": self.api_key},
                json=payload,
                timeout=self.timeout,
            )
            if response.status_code != 200:
                logger.error(f"Gemini error response {response.status_code}: {response.text[:500]}")
                raise ProviderError(
                    f"Gemini API returned HTTP {response.status_code}",
                    details=self._upstream_message(response),
                )
            data = response.json()
        except requests.exceptions.Timeout as e:
            raise GenerationTimeoutError(
                f"Gemini did not respond within {self.timeout}s", details=str(e)
            ) from e
        except requests.exceptions.RequestException as e:
            raise ProviderError(f"Error generating answer: {e}", details=str(e)) from e
        except ValueError as e:
            raise ProviderError("Gemini returned a non-JSON response", details=str(e)) from e

        # Extract answer from Gemini response
        try:
            parts = data["candidates"][0]["content"]["parts"]
            answer = "".join(part.get("text", "") for part in parts)
        except (KeyError, IndexError, TypeError) as e:
            reason = data.get("promptFeedback", {}).get("blockReason") if isinstance(data, dict) else None
            raise ProviderError(
                "Error parsing generation response", details=reason or f"missing {e}"
            ) from e

        logger.info(f"[WORKFLOW] 6a. Gemini response received, length: {len(answer)}")
        return answer
