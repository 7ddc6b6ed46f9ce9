#!/usr/bin/env python3
"""
Configuration management for the Bookly support backend.
"""

import os
from dotenv import load_dotenv

from ..utils.logger import get_logger

# Load environment variables from .env file
load_dotenv()

logger = get_logger(__name__)

_DATA_DIR = os.path.join(os.path.dirname(__file__), "..", "data")


class Config:
    """Configuration class for the application."""

    # Gemini (Google) API Configuration
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
    GEMINI_API_BASE = os.getenv("GEMINI_API_BASE", "https://generativelanguage.googleapis.com/v1beta/models")
    GENERATION_TIMEOUT_SECONDS = float(os.getenv("GENERATION_TIMEOUT_SECONDS", 30))
    GENERATION_TEMPERATURE = float(os.getenv("GENERATION_TEMPERATURE", 0.4))
    GENERATION_MAX_OUTPUT_TOKENS = int(os.getenv("GENERATION_MAX_OUTPUT_TOKENS", 800))

    # Database Configuration
    DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite:///{os.path.abspath(os.path.join(_DATA_DIR, 'bookly.db'))}")

    # Whoosh Configuration
    WHOOSH_INDEX_PATH = os.getenv(
        "WHOOSH_INDEX_PATH", os.path.abspath(os.path.join(_DATA_DIR, "processed", "knowledge_index"))
    )

    # Retrieval bounds
    MAX_ORDER_RESULTS = int(os.getenv("MAX_ORDER_RESULTS", 3))
    MAX_KNOWLEDGE_RESULTS = int(os.getenv("MAX_KNOWLEDGE_RESULTS", 3))
    MAX_KEYWORDS = int(os.getenv("MAX_KEYWORDS", 5))
    # keywords must be strictly longer than this
    MIN_KEYWORD_LENGTH = int(os.getenv("MIN_KEYWORD_LENGTH", 3))

    # Server Configuration
    HOST = os.getenv("HOST", "localhost")
    PORT = int(os.getenv("PORT", 3001))
    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
    STATIC_DIR = os.getenv("STATIC_DIR", "public")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    ENVIRONMENT = os.getenv("NODE_ENV", os.getenv("ENVIRONMENT", "development"))

    @classmethod
    def debug_print(cls):
        key = cls.GEMINI_API_KEY
        key_state = f"set (...{key[-4:]})" if key else "not set"
        logger.info(f"[CONFIG] GEMINI_MODEL={cls.GEMINI_MODEL} key={key_state} timeout={cls.GENERATION_TIMEOUT_SECONDS}s")
        logger.info(f"[CONFIG] DATABASE_URL={cls.DATABASE_URL}")
        logger.info(f"[CONFIG] WHOOSH_INDEX_PATH={cls.WHOOSH_INDEX_PATH}")
        logger.info(
            f"[CONFIG] limits orders={cls.MAX_ORDER_RESULTS} knowledge={cls.MAX_KNOWLEDGE_RESULTS} "
            f"keywords={cls.MAX_KEYWORDS}"
        )

    @classmethod
    def validate(cls):
        """Validate that numeric configuration is usable.

        The Gemini key is deliberately not required here; a missing key is
        reported per query as a ConfigurationError.
        """
        invalid = []

        if cls.GENERATION_TIMEOUT_SECONDS <= 0:
            invalid.append("GENERATION_TIMEOUT_SECONDS")
        if cls.MAX_ORDER_RESULTS < 1:
            invalid.append("MAX_ORDER_RESULTS")
        if cls.MAX_KNOWLEDGE_RESULTS < 1:
            invalid.append("MAX_KNOWLEDGE_RESULTS")
        if cls.MAX_KEYWORDS < 1:
            invalid.append("MAX_KEYWORDS")
        if cls.MIN_KEYWORD_LENGTH < 0:
            invalid.append("MIN_KEYWORD_LENGTH")

        if invalid:
            raise ValueError(f"Invalid configuration: {', '.join(invalid)}")

        return True

# Validate configuration on import
Config.validate()
