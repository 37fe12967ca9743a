"""
Shared fixtures: test settings, an in-memory Supabase stand-in and an API client.
"""

import copy
import os
import uuid
from datetime import datetime, timezone

import pytest

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-for-unit-tests-only")
os.environ.setdefault("SCHEDULER_ENABLED", "false")

from fastapi.testclient import TestClient  # noqa: E402

from eido.core.dependencies import get_admin_db, get_db  # noqa: E402
from eido.core.security import create_access_token  # noqa: E402
from eido.main import app  # noqa: E402

USER_A = "11111111-1111-1111-1111-111111111111"
USER_B = "22222222-2222-2222-2222-222222222222"


def _norm(value):
    if value is None:
        return None
    if hasattr(value, "value"):
        value = value.value
    return str(value)


class FakeResult:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    """Mimics the postgrest query builder chain for one table."""

    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self.order_by = None
        self.max_rows = None

    # ── operations ──
    def select(self, *columns, count=None):
        self.op = "select"
        return self

    def insert(self, rows):
        self.op, self.payload = "insert", rows
        return self

    def update(self, changes):
        self.op, self.payload = "update", changes
        return self

    def upsert(self, row):
        self.op, self.payload = "upsert", row
        return self

    def delete(self):
        self.op = "delete"
        return self

    # ── filters ──
    def eq(self, column, value):
        self.filters.append(lambda r: _norm(r.get(column)) == _norm(value))
        return self

    def gte(self, column, value):
        self.filters.append(lambda r: r.get(column) is not None and r[column] >= value)
        return self

    def lte(self, column, value):
        self.filters.append(lambda r: r.get(column) is not None and r[column] <= value)
        return self

    def lt(self, column, value):
        self.filters.append(lambda r: r.get(column) is not None and r[column] < value)
        return self

    def in_(self, column, values):
        wanted = {_norm(v) for v in values}
        self.filters.append(lambda r: _norm(r.get(column)) in wanted)
        return self

    def order(self, column, desc=False):
        self.order_by = (column, desc)
        return self

    def limit(self, n):
        self.max_rows = n
        return self

    def _matches(self, row):
        return all(f(row) for f in self.filters)

    def execute(self):
        self.db.calls.append((self.table, self.op))
        if (self.table, self.op) in self.db.fail_on:
            raise RuntimeError(f"simulated failure on {self.table}.{self.op}")

        rows = self.db.tables.setdefault(self.table, [])

        if self.op == "insert":
            batch = self.payload if isinstance(self.payload, list) else [self.payload]
            created = []
            for item in batch:
                row = {"id": str(uuid.uuid4()), "created_at": datetime.now(timezone.utc).isoformat()}
                row.update(copy.deepcopy(item))
                created.append(row)
            rows.extend(created)
            return FakeResult(copy.deepcopy(created))

        if self.op == "upsert":
            key = self.db.primary_keys.get(self.table, "id")
            existing = [r for r in rows if r.get(key) == self.payload.get(key)]
            if existing:
                existing[0].update(copy.deepcopy(self.payload))
                return FakeResult([copy.deepcopy(existing[0])])
            rows.append(copy.deepcopy(self.payload))
            return FakeResult([copy.deepcopy(self.payload)])

        matched = [r for r in rows if self._matches(r)]

        if self.op == "update":
            for r in matched:
                r.update(copy.deepcopy(self.payload))
            return FakeResult(copy.deepcopy(matched))

        if self.op == "delete":
            self.db.tables[self.table] = [r for r in rows if not self._matches(r)]
            return FakeResult(copy.deepcopy(matched))

        if self.order_by:
            column, desc = self.order_by
            matched = sorted(matched, key=lambda r: r.get(column) or "", reverse=desc)
        if self.max_rows is not None:
            matched = matched[: self.max_rows]
        return FakeResult(copy.deepcopy(matched), count=len(matched))


class FakeSupabase:
    """In-memory stand-in for ``supabase.Client`` (tables only)."""

    def __init__(self):
        self.tables: dict[str, list[dict]] = {}
        self.primary_keys = {"user_preferences": "user_id"}
        self.fail_on: set[tuple[str, str]] = set()
        self.calls: list[tuple[str, str]] = []

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def rows(self, name: str) -> list[dict]:
        return self.tables.get(name, [])

    def seed(self, name: str, **row) -> dict:
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        self.tables.setdefault(name, []).append(row)
        return row


@pytest.fixture
def fake_db():
    return FakeSupabase()


@pytest.fixture
def client(fake_db):
    app.dependency_overrides[get_db] = lambda: fake_db
    app.dependency_overrides[get_admin_db] = lambda: fake_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth_headers(user_id: str = USER_A) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}
