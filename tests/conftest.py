"""
pytest configuration and fixtures for the guestbook API test suite
An in-memory pool stands in for PostgreSQL so the suite runs without a database.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

import asyncpg
import httpx
import pytest
import pytest_asyncio

from app import create_app
from database.connection import get_db_pool


class FakeConnection:
    """Answers the handful of statements the service issues"""

    def __init__(self, pool: "FakePool"):
        self.pool = pool

    def _check(self, query: str, params) -> None:
        self.pool.statements.append((" ".join(query.split()), params))
        if self.pool.fail:
            raise asyncpg.InterfaceError("connection is closed")

    async def fetch(self, query: str, *params) -> List[Dict[str, Any]]:
        self._check(query, params)
        rows = sorted(self.pool.rows, key=lambda r: (r["created_at"], r["id"]), reverse=True)
        return [dict(row) for row in rows[:params[0]]]

    async def fetchrow(self, query: str, *params):
        self._check(query, params)
        self.pool.next_id += 1
        name, message = params
        self.pool.rows.append({
            "id": self.pool.next_id,
            "name": name,
            "message": message,
            # Strictly increasing so ordering is deterministic
            "created_at": self.pool.epoch + timedelta(milliseconds=self.pool.next_id),
        })
        return {"id": self.pool.next_id}

    async def execute(self, query: str, *params) -> str:
        self._check(query, params)
        if query.strip().upper().startswith("DELETE"):
            before = len(self.pool.rows)
            self.pool.rows = [r for r in self.pool.rows if r["id"] != params[0]]
            return f"DELETE {before - len(self.pool.rows)}"
        return "CREATE TABLE"


class _Acquire:
    def __init__(self, pool: "FakePool"):
        self.pool = pool

    async def __aenter__(self) -> FakeConnection:
        self.pool.in_use += 1
        self.pool.acquired += 1
        return FakeConnection(self.pool)

    async def __aexit__(self, *exc_info) -> None:
        self.pool.in_use -= 1


class FakePool:
    """Minimal stand-in for asyncpg.Pool"""

    def __init__(self):
        self.rows: List[Dict[str, Any]] = []
        self.statements: List[tuple] = []
        self.next_id = 0
        self.epoch = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.fail = False
        self.closed = False
        self.in_use = 0
        self.acquired = 0

    def acquire(self) -> _Acquire:
        return _Acquire(self)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_pool() -> FakePool:
    return FakePool()


@pytest_asyncio.fixture
async def client(fake_pool):
    """HTTP client bound to an app whose pool dependency is the fake pool"""
    app = create_app()
    app.dependency_overrides[get_db_pool] = lambda: fake_pool

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client
