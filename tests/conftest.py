"""Shared fixtures.

`FakeBackend` is an in-memory stand-in for the Supabase client: it supports
the query-builder calls the repositories use (select with count/head and
embedded users, eq, gte, order, limit, insert, update, upsert on_conflict)
and the three auth calls used for sign-up, sign-in and token lookup.
"""

from __future__ import annotations

import itertools
import uuid
from datetime import datetime, timedelta
from types import SimpleNamespace
from typing import Any
from unittest.mock import MagicMock

import pytest

from growthpath.config import clear_config_cache
from growthpath.db.backend import reset_backend, set_backend

BASE_TIME = datetime(2024, 9, 1, 8, 0, 0)


class FakeQuery:
    """Chainable query over one in-memory table."""

    def __init__(self, backend: "FakeBackend", table: str):
        self.backend = backend
        self.table = table
        self.op = "select"
        self.columns = "*"
        self.count_mode: str | None = None
        self.head = False
        self.payload: Any = None
        self.on_conflict: str | None = None
        self.filters: list[tuple[str, str, Any]] = []
        self.ordering: tuple[str, bool] | None = None
        self.row_limit: int | None = None

    def select(self, columns: str = "*", count: str | None = None, head: bool = False):
        self.op = "select"
        self.columns = columns
        self.count_mode = count
        self.head = head
        return self

    def insert(self, payload: Any):
        self.op = "insert"
        self.payload = payload
        return self

    def update(self, payload: dict[str, Any]):
        self.op = "update"
        self.payload = payload
        return self

    def upsert(self, payload: Any, on_conflict: str | None = None):
        self.op = "upsert"
        self.payload = payload
        self.on_conflict = on_conflict
        return self

    def eq(self, column: str, value: Any):
        self.filters.append(("eq", column, value))
        return self

    def gte(self, column: str, value: Any):
        self.filters.append(("gte", column, value))
        return self

    def order(self, column: str, desc: bool = False):
        self.ordering = (column, desc)
        return self

    def limit(self, n: int):
        self.row_limit = n
        return self

    def _matches(self, row: dict[str, Any]) -> bool:
        for op, column, value in self.filters:
            if op == "eq" and row.get(column) != value:
                return False
            if op == "gte" and (row.get(column) is None or row[column] < value):
                return False
        return True

    def execute(self) -> SimpleNamespace:
        self.backend.calls.append((self.table, self.op))
        if self.table in self.backend.failing_tables:
            raise RuntimeError(f"{self.table} unavailable")

        rows = self.backend.tables.setdefault(self.table, [])

        if self.op == "insert":
            batch = self.payload if isinstance(self.payload, list) else [self.payload]
            stored = [self.backend.new_row(self.table, r) for r in batch]
            return SimpleNamespace(data=[dict(r) for r in stored], count=None)

        if self.op == "update":
            changed = [r for r in rows if self._matches(r)]
            for r in changed:
                r.update(self.payload)
            return SimpleNamespace(data=[dict(r) for r in changed], count=None)

        if self.op == "upsert":
            keys = (self.on_conflict or "id").split(",")
            batch = self.payload if isinstance(self.payload, list) else [self.payload]
            out = []
            for incoming in batch:
                existing = next(
                    (r for r in rows if all(r.get(k) == incoming.get(k) for k in keys)),
                    None,
                )
                if existing is None:
                    existing = self.backend.new_row(self.table, incoming)
                else:
                    existing.update(incoming)
                out.append(dict(existing))
            return SimpleNamespace(data=out, count=None)

        selected = [dict(r) for r in rows if self._matches(r)]
        if self.ordering:
            column, desc = self.ordering
            selected.sort(key=lambda r: r.get(column) or "", reverse=desc)
        if self.row_limit is not None:
            selected = selected[: self.row_limit]
        if "users!" in self.columns:
            users = {u["id"]: u for u in self.backend.tables.get("users", [])}
            for r in selected:
                user = users.get(r.get("user_id"), {})
                r["users"] = {"full_name": user.get("full_name"), "email": user.get("email")}

        count = len(selected) if self.count_mode == "exact" else None
        return SimpleNamespace(data=[] if self.head else selected, count=count)


class FakeAuth:
    """Password accounts and bearer tokens."""

    def __init__(self):
        self.accounts: dict[str, tuple[str, str]] = {}
        self.tokens: dict[str, str] = {}

    def sign_up(self, credentials: dict[str, Any]) -> SimpleNamespace:
        email = credentials["email"]
        if email in self.accounts:
            raise RuntimeError("User already registered")
        user_id = str(uuid.uuid4())
        self.accounts[email] = (credentials["password"], user_id)
        return SimpleNamespace(user=SimpleNamespace(id=user_id, email=email), session=None)

    def sign_in_with_password(self, credentials: dict[str, Any]) -> SimpleNamespace:
        account = self.accounts.get(credentials["email"])
        if account is None or account[0] != credentials["password"]:
            raise RuntimeError("Invalid login credentials")
        token = self.issue_token(account[1])
        return SimpleNamespace(
            user=SimpleNamespace(id=account[1]),
            session=SimpleNamespace(access_token=token),
        )

    def get_user(self, token: str) -> SimpleNamespace:
        user_id = self.tokens.get(token)
        if user_id is None:
            raise RuntimeError("invalid JWT")
        return SimpleNamespace(user=SimpleNamespace(id=user_id))

    def issue_token(self, user_id: str) -> str:
        token = f"token-{user_id}"
        self.tokens[token] = user_id
        return token


class FakeBackend:
    """In-memory Supabase client."""

    def __init__(self):
        self.tables: dict[str, list[dict[str, Any]]] = {}
        self.failing_tables: set[str] = set()
        self.calls: list[tuple[str, str]] = []
        self.auth = FakeAuth()
        self._clock = itertools.count()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def new_row(self, table: str, row: dict[str, Any]) -> dict[str, Any]:
        stored = dict(row)
        stored.setdefault("id", str(uuid.uuid4()))
        stored.setdefault(
            "created_at", (BASE_TIME + timedelta(seconds=next(self._clock))).isoformat()
        )
        self.tables.setdefault(table, []).append(stored)
        return stored

    def rows(self, table: str) -> list[dict[str, Any]]:
        return self.tables.get(table, [])

    # Seeding helpers

    def add_user(self, user_id: str, email: str, full_name: str, role: str) -> dict[str, Any]:
        return self.new_row(
            "users",
            {"id": user_id, "email": email, "full_name": full_name, "role": role},
        )

    def add_student(self, student_id: str, user_id: str, **fields: Any) -> dict[str, Any]:
        row = {
            "id": student_id,
            "user_id": user_id,
            "student_number": f"STU{len(self.rows('students')) + 1:06d}",
            "status": "active",
            "overall_progress": 0,
            "streak_days": 0,
            "last_activity": "2024-09-01",
            "enrollment_date": "2024-08-01",
        }
        row.update(fields)
        return self.new_row("students", row)

    def add_learning(self, student_id: str, **fields: Any) -> dict[str, Any]:
        row = {
            "student_id": student_id,
            "topic": "Introduction to HTML",
            "status": "not-started",
            "learning_date": "2024-08-20",
            "quiz_score": None,
        }
        row.update(fields)
        return self.new_row("learning_records", row)

    def add_attendance(self, student_id: str, day: str, status: str = "present") -> dict[str, Any]:
        return self.new_row(
            "attendance_records",
            {"student_id": student_id, "date": day, "status": status, "notes": None},
        )


@pytest.fixture(autouse=True)
def _isolated_config():
    """Reload config for every test."""
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def backend():
    """Install a fresh FakeBackend as the shared client."""
    fake = FakeBackend()
    set_backend(fake)
    yield fake
    reset_backend()


@pytest.fixture
def mock_llm_client():
    """LLM client that answers every prompt without a network call."""
    client = MagicMock()
    client.has_api_key = True
    client.simple_chat.return_value = "Keep up the consistent work."
    return client


@pytest.fixture
def student_account(backend):
    """A signed-in student with a student row; returns (user_id, student_id, token)."""
    backend.add_user("u-stu", "ana@example.com", "Ana Lopez", "student")
    backend.add_student(
        "s-ana",
        "u-stu",
        student_number="STU000101",
        overall_progress=50,
        streak_days=3,
    )
    return "u-stu", "s-ana", backend.auth.issue_token("u-stu")


@pytest.fixture
def instructor_token(backend):
    """Bearer token for a signed-in instructor."""
    backend.add_user("u-ins", "tom@example.com", "Tom Rivera", "instructor")
    return backend.auth.issue_token("u-ins")
