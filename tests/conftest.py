"""Shared fixtures for the async test runtime."""

import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

import pytest


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
