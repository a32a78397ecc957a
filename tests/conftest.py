"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture(autouse=True)
def reset_wati_singletons():
    """Webhook trigger/dispatcher are built from config on first use."""
    from transport.wati import webhook

    webhook._trigger = None
    webhook._dispatcher = None
    yield
    webhook._trigger = None
    webhook._dispatcher = None
