"""
Shared pytest fixtures and configuration for all tests.
"""

import os
import sys
from collections.abc import AsyncGenerator, Callable, Generator
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import UUID

import pytest
import pytest_asyncio
import strawberry

# Add src directory to path so imports work
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from blogexpress.auth.context import AuthContext  # noqa: E402
from blogexpress.config import settings  # noqa: E402


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch: pytest.MonkeyPatch) -> None:
    """Use the cheapest bcrypt cost factor so tests stay fast."""
    monkeypatch.setattr(settings, "bcrypt_rounds", 4)


@pytest_asyncio.fixture(scope="function")
async def database(tmp_path: Path) -> AsyncGenerator[str, None]:
    """Point the shared engine at a fresh SQLite file with all tables created."""
    from blogexpress.database.connection import (
        create_tables,
        dispose_database,
        init_database,
        reset_database,
    )

    url = f"sqlite:///{tmp_path / 'blogexpress.db'}"

    reset_database()
    init_database(url, force_reinit=True)
    await create_tables()

    yield url

    await dispose_database()


@pytest.fixture
def make_info() -> Callable[[AuthContext | None], Any]:
    """Build a mock GraphQL info object carrying the given identity."""

    def _make(auth: AuthContext | None = None) -> Any:
        info = MagicMock(spec=strawberry.Info)
        info.context = {
            "request": MagicMock(),
            "auth": auth if auth is not None else AuthContext.anonymous(),
        }
        return info

    return _make


@pytest.fixture
def anonymous_info(make_info):
    return make_info(AuthContext.anonymous())


@pytest.fixture
def mock_mailer() -> Generator[MagicMock, None, None]:
    """Replace the SMTP mailer used by the password reset flow."""
    mailer = MagicMock()
    mailer.send_password_reset = AsyncMock()
    with patch("blogexpress.graphql.resolvers.user.get_mailer", return_value=mailer):
        yield mailer


@pytest.fixture
def register(database, make_info):
    """Register an account through the createUser resolver and return its id."""
    _ = database
    from blogexpress.graphql.mutations.root import UserInputData
    from blogexpress.graphql.resolvers.user import create_user

    async def _register(email: str, name: str = "Tester", password: str = "secret") -> UUID:
        user = await create_user(
            make_info(),
            UserInputData(
                email=email, name=name, password=password, confirm_password=password
            ),
        )
        return UUID(str(user.id))

    return _register


@pytest.fixture
def user_info(make_info):
    """Info object authenticated as the given user id and role."""

    def _user_info(user_id: UUID, role: str = "USER") -> Any:
        return make_info(AuthContext(user_id=user_id, role=role))

    return _user_info


# Test markers
def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test")  # type: ignore[reportUnknownMemberType]
    config.addinivalue_line("markers", "unit: mark test as unit test")  # type: ignore[reportUnknownMemberType]
