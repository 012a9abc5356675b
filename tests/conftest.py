"""Shared test fixtures for LifeOS tests.

This module provides common fixtures used across all test modules:
- Database isolation with temporary files
- Momentum manager with an injectable clock
- Standard test user data
- Fake OpenAI clients

Usage:
    def test_something(temp_db):
        # temp_db is automatically cleaned up after the test
        ...
"""

import os
import tempfile
from collections.abc import Generator
from datetime import date
from pathlib import Path
from unittest.mock import MagicMock

import pytest


# ─────────────────────────────────────────────────────────────────────────────
# Path Constants
# ─────────────────────────────────────────────────────────────────────────────

PROJECT_ROOT = Path(__file__).parent.parent
PACKAGE_DIR = PROJECT_ROOT / "lifeos"


# ─────────────────────────────────────────────────────────────────────────────
# Database Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def temp_db() -> Generator[Path, None, None]:
    """Create a temporary database file for testing.

    The database file is automatically deleted after the test completes.

    Yields:
        Path to the temporary database file
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    yield db_path

    # Cleanup
    if db_path.exists():
        os.unlink(db_path)


@pytest.fixture
def temp_blob_dir(tmp_path: Path) -> Path:
    """Empty directory for vault blobs."""
    blob_dir = tmp_path / "vault"
    blob_dir.mkdir(parents=True, exist_ok=True)
    return blob_dir


# ─────────────────────────────────────────────────────────────────────────────
# User Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def mock_user_id() -> str:
    """Standard test user ID."""
    return "test_user_123"


@pytest.fixture
def other_user_id() -> str:
    """A second user, for ownership checks."""
    return "other_user_456"


# ─────────────────────────────────────────────────────────────────────────────
# Momentum Fixtures
# ─────────────────────────────────────────────────────────────────────────────


class FakeClock:
    """Callable 'today' that tests can move forward."""

    def __init__(self, today: date):
        self.today = today

    def __call__(self) -> date:
        return self.today

    def set(self, today: date) -> None:
        self.today = today


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(date(2024, 3, 10))


@pytest.fixture
def repositories(temp_db):
    """SQLite task and user repositories on a temporary database."""
    from lifeos.momentum.repository import SQLiteTaskRepository, SQLiteUserRepository

    return SQLiteTaskRepository(temp_db), SQLiteUserRepository(temp_db)


@pytest.fixture
def momentum(repositories, clock):
    """MomentumManager wired to temporary storage and a fake clock."""
    from lifeos.momentum.manager import MomentumManager

    tasks, users = repositories
    return MomentumManager(tasks, users, today=clock)


# ─────────────────────────────────────────────────────────────────────────────
# LLM Fixtures
# ─────────────────────────────────────────────────────────────────────────────


def make_openai_client(content: str | None = None, error: Exception | None = None) -> MagicMock:
    """Fake OpenAI client whose chat completion returns ``content`` or raises ``error``."""
    client = MagicMock()
    if error is not None:
        client.chat.completions.create.side_effect = error
    else:
        response = MagicMock()
        response.choices = [MagicMock()]
        response.choices[0].message.content = content
        client.chat.completions.create.return_value = response
    return client


@pytest.fixture
def fake_openai():
    """Factory for fake OpenAI clients."""
    return make_openai_client
