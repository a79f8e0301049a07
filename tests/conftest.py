"""Pytest configuration helpers for test collection.

Ensure the project root is on sys.path so tests can import the package
without requiring PYTHONPATH to be set externally, and provide a registry
wired over in-memory storage for the service tests.
"""
import sys
from pathlib import Path

import pytest


def pytest_configure(config):
    # Insert repo root (one level up from tests/) to sys.path
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root))


@pytest.fixture
def registry():
    from inspection_lib.main import Config, create_registry
    from inspection_lib.storage import MemoryStorage

    return create_registry(Config(storage_backend="memory"), storage=MemoryStorage())
