"""
Pytest configuration and fixtures.
"""

import pytest

from statement_ocr.config import Settings


@pytest.fixture
def settings() -> Settings:
    """Settings with a fake key and no retry delay."""
    return Settings(
        _env_file=None,
        llm_provider="gemini",
        gemini_api_key="test-gemini-key",
        llm_max_attempts=3,
        llm_retry_backoff=0,
    )
