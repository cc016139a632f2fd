"""
pytest configuration for the musicshelf project.

pytest-django configures settings from pyproject.toml; this module keeps
process-wide state (the shelf cache and the shared OpenAI client) from
leaking between tests.
"""

import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent

# Scripts import apps by their top-level names
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture(autouse=True)
def isolated_shelf_cache():
    """Start and finish every test with an empty cache."""
    from django.core.cache import cache

    cache.clear()
    yield
    cache.clear()


@pytest.fixture(autouse=True)
def fresh_openai_client():
    """Drop any OpenAI client built by a previous test."""
    from agent.services import llm_handler

    llm_handler._CLIENT_STATE["client"] = None
    llm_handler.reset_llm_usage_tracker()
    yield
    llm_handler._CLIENT_STATE["client"] = None
