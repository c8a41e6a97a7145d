"""Pytest fixtures for test configuration.

Global test safety measures:
 - Never read a developer's .env during tests (LFM_ENABLE_DOTENV unset)
 - Point the record store at tmp_path via the test_config fixture
"""
import os
from pathlib import Path
from typing import Dict, Any

import pytest

# Expose mock fixtures (mock_db, sample_lost, sample_found)
from tests.mocks.fixtures import *  # noqa: F401,F403


def pytest_sessionstart(session):  # type: ignore[no-untyped-def]
    os.environ.pop('LFM_ENABLE_DOTENV', None)


@pytest.fixture
def test_config(tmp_path: Path) -> Dict[str, Any]:
    """Provide a minimal test configuration as a dict.

    Tests should use this fixture and pass cfg to CLI/modules directly,
    rather than creating config files or setting environment variables.
    """
    return {
        'log_level': 'DEBUG',
        'matching': {
            'min_similarity': 0.3,
            'diagnose_top_n': 5,
        },
        'logging': {
            'progress_enabled': True,
            'progress_interval': 1,
        },
        'database': {
            'path': str(tmp_path / 'db.sqlite'),
        },
    }
