"""Pytest configuration and fixtures."""

import os
import re
import uuid
from collections.abc import Generator
from datetime import datetime, timezone
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError as PostgrestAPIError

# Set test environment variables before importing application modules
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SECRET_KEY", "test-secret-key")


UNIQUE_COLUMNS = ("username", "profile_key")

PROFILE_DEFAULTS: dict[str, Any] = {
    "profile_key": None,
    "name": None,
    "job_title": None,
    "profile_image": None,
    "header_image": None,
    "phone": None,
    "email": None,
    "is_verified": False,
    "social_links": None,
}


def _ilike_regex(pattern: str) -> re.Pattern[str]:
    """Translate a PostgREST ilike pattern into an anchored regex.

    PostgREST rewrites every * to % before Postgres sees the pattern, escaped
    or not, so an escaped \\* ends up matching a literal %.
    """
    parts = []
    chars = iter(pattern.replace("*", "%"))
    for char in chars:
        if char == "\\":
            parts.append(re.escape(next(chars, "\\")))
        elif char == "%":
            parts.append(".*")
        elif char == "_":
            parts.append(".")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts), re.IGNORECASE | re.DOTALL)


class FakeResponse:
    """Stand-in for a postgrest APIResponse."""

    def __init__(self, data: list[dict[str, Any]]) -> None:
        self.data = data


class FakeQuery:
    """Chainable query builder over an in-memory table."""

    def __init__(self, table: "FakeTable", action: str, payload: Any = None) -> None:
        self.table = table
        self.action = action
        self.payload = payload
        self.filters: list[Any] = []
        self.max_rows: int | None = None

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def is_(self, column: str, value: str) -> "FakeQuery":
        assert value == "null"
        self.filters.append(lambda row: row.get(column) is None)
        return self

    def ilike(self, column: str, pattern: str) -> "FakeQuery":
        regex = _ilike_regex(pattern)
        self.filters.append(
            lambda row: row.get(column) is not None and regex.fullmatch(row[column]) is not None
        )
        return self

    def limit(self, count: int) -> "FakeQuery":
        self.max_rows = count
        return self

    def _matching(self) -> list[dict[str, Any]]:
        rows = [row for row in self.table.rows if all(f(row) for f in self.filters)]
        return rows[: self.max_rows] if self.max_rows is not None else rows

    def execute(self) -> FakeResponse:
        if self.table.client.fail_with is not None:
            raise self.table.client.fail_with

        if self.action == "select":
            return FakeResponse([self.table.project(row, self.payload) for row in self._matching()])

        if self.action == "insert":
            now = datetime.now(timezone.utc).isoformat()
            row = {
                **PROFILE_DEFAULTS,
                **self.payload,
                "id": str(uuid.uuid4()),
                "created_at": now,
                "updated_at": now,
            }
            self.table.check_unique(row)
            self.table.rows.append(row)
            return FakeResponse([dict(row)])

        if self.action == "update":
            updated = []
            for row in self._matching():
                candidate = {**row, **self.payload}
                self.table.check_unique(candidate, ignore_id=row["id"])
                row.update(self.payload)
                row["updated_at"] = datetime.now(timezone.utc).isoformat()
                updated.append(dict(row))
            return FakeResponse(updated)

        if self.action == "delete":
            deleted = self._matching()
            self.table.rows = [row for row in self.table.rows if row not in deleted]
            return FakeResponse([dict(row) for row in deleted])

        raise AssertionError(f"unsupported action {self.action}")


class FakeTable:
    """In-memory table enforcing unique indexes on username and profile_key."""

    def __init__(self, client: "FakeSupabaseClient") -> None:
        self.client = client
        self.rows: list[dict[str, Any]] = []

    @staticmethod
    def project(row: dict[str, Any], columns: str) -> dict[str, Any]:
        if columns.strip() == "*":
            return dict(row)
        return {name.strip(): row.get(name.strip()) for name in columns.split(",")}

    def check_unique(self, candidate: dict[str, Any], ignore_id: str | None = None) -> None:
        for other in self.rows:
            if other["id"] == ignore_id:
                continue
            for column in UNIQUE_COLUMNS:
                value = candidate.get(column)
                if value is not None and other.get(column) == value:
                    raise PostgrestAPIError(
                        {
                            "message": f'duplicate key value violates unique constraint "profiles_{column}_key"',
                            "code": "23505",
                            "hint": None,
                            "details": f"Key ({column})=({value}) already exists.",
                        }
                    )

    def select(self, columns: str = "*") -> FakeQuery:
        return FakeQuery(self, "select", columns)

    def insert(self, row: dict[str, Any]) -> FakeQuery:
        return FakeQuery(self, "insert", row)

    def update(self, values: dict[str, Any]) -> FakeQuery:
        return FakeQuery(self, "update", values)

    def delete(self) -> FakeQuery:
        return FakeQuery(self, "delete")


class FakeSupabaseClient:
    """Minimal in-memory substitute for the Supabase client in tests."""

    def __init__(self) -> None:
        self.tables: dict[str, FakeTable] = {}
        self.fail_with: Exception | None = None

    def table(self, name: str) -> FakeTable:
        return self.tables.setdefault(name, FakeTable(self))

    def seed(self, **fields: Any) -> dict[str, Any]:
        """Insert a row directly, bypassing the service."""
        return self.table("profiles").insert(fields).execute().data[0]


@pytest.fixture(scope="session")
def test_settings() -> Generator[Any, None, None]:
    """Provide test settings with cleared cache.

    Yields:
        Settings: Test configuration settings.
    """
    from src.core.config import get_settings

    # Clear the cache to ensure fresh settings
    get_settings.cache_clear()

    settings = get_settings()
    yield settings

    # Clean up cache after tests
    get_settings.cache_clear()


@pytest.fixture
def fake_supabase() -> FakeSupabaseClient:
    """Provide an empty in-memory profiles store."""
    return FakeSupabaseClient()


@pytest.fixture
def mock_supabase_client() -> Generator[MagicMock, None, None]:
    """Provide a mocked Supabase client wired into application startup.

    Yields:
        MagicMock: Mocked Supabase client for testing.
    """
    mock_client = MagicMock()

    # Configure default mock responses
    mock_response = MagicMock()
    mock_response.data = []
    mock_client.table.return_value.select.return_value.limit.return_value.execute.return_value = (
        mock_response
    )

    with patch("src.core.supabase.get_supabase_client", return_value=mock_client):
        yield mock_client


@pytest.fixture
def client(fake_supabase: FakeSupabaseClient) -> Generator[TestClient, None, None]:
    """Provide a test client backed by the in-memory store.

    Args:
        fake_supabase: In-memory Supabase client fixture.

    Yields:
        TestClient: FastAPI test client.
    """
    with patch("src.core.supabase.get_supabase_client", return_value=fake_supabase):
        from src.main import app

        with TestClient(app) as test_client:
            yield test_client
