# tests/conftest.py
"""
Pytest configuration and fixtures for the TicketDesk test suite.

Provides:
- Supabase mock client (tables, nested selects, auth) for testing
- Seeded ticket/comment/label/profile data
- FastAPI test client

Note: Tests never reach a real Supabase project. The mock records every
executed call so tests can assert on round trips.
"""

import os
import re
import uuid
from copy import deepcopy
from datetime import datetime, timezone
from types import SimpleNamespace
from typing import Any, Dict, Generator, List, Optional, Tuple
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

# Set test environment before imports
os.environ["TICKETDESK_ENV"] = "test"
os.environ["SUPABASE_URL"] = "https://test.supabase.co"
os.environ["SUPABASE_KEY"] = "test-key"

from ticketdesk.main import app
from ticketdesk.models import Caller
from ticketdesk.services import get_ticket_service


# ============== Supabase Mock Fixtures ==============

_OR_ILIKE = re.compile(r'(\w+)\.ilike\."((?:[^"\\]|\\.)*)"')


class MockSupabaseResponse:
    """Mock response from Supabase operations."""
    def __init__(self, data: Any = None, count: int = None):
        self.data = data if data is not None else []
        self.count = count if count is not None else (len(self.data) if isinstance(self.data, list) else 1)


class MockSupabaseTable:
    """Mock Supabase table with chainable methods."""

    def __init__(self, table_name: str, client: "MockSupabaseClient"):
        self.table_name = table_name
        self._client = client
        self._op = "select"
        self._payload = None
        self._select_cols = "*"
        self._filters: List[Tuple[str, str, Any]] = []
        self._or_terms: List[Tuple[str, str]] = []
        self._order_by = None
        self._limit = None
        self._single = False

    # ---- operations ----

    def select(self, columns: str = "*", count: str = None):
        self._select_cols = columns
        return self

    def insert(self, data):
        self._op = "insert"
        self._payload = [data] if isinstance(data, dict) else list(data)
        return self

    def update(self, data: Dict):
        self._op = "update"
        self._payload = data
        return self

    # ---- filters ----

    def eq(self, column: str, value: Any):
        self._filters.append(("eq", column, value))
        return self

    def in_(self, column: str, values: List[Any]):
        self._filters.append(("in", column, list(values)))
        return self

    def or_(self, filters: str):
        for column, pattern in _OR_ILIKE.findall(filters):
            pattern = pattern.replace('\\"', '"').replace("\\\\", "\\")
            self._or_terms.append((column, pattern.strip("%").lower()))
        return self

    def order(self, column: str, desc: bool = False):
        self._order_by = (column, desc)
        return self

    def limit(self, count: int):
        self._limit = count
        return self

    def single(self):
        self._single = True
        return self

    # ---- execution ----

    def _matches(self, row: Dict) -> bool:
        for kind, column, value in self._filters:
            if kind == "eq" and row.get(column) != value:
                return False
            if kind == "in" and row.get(column) not in value:
                return False
        if self._or_terms:
            return any(
                needle in (row.get(column) or "").lower()
                for column, needle in self._or_terms
            )
        return True

    def _embed(self, row: Dict) -> Dict:
        row = deepcopy(row)
        store = self._client.store
        if self.table_name == "tickets" and "comments" in self._select_cols:
            row["comments"] = [
                {k: c.get(k) for k in ("id", "body", "created_at", "author_id")}
                for c in store.get("comments", [])
                if c.get("ticket_id") == row["id"]
            ]
        if self.table_name == "tickets" and "tickets_labels" in self._select_cols:
            labels = {lbl["id"]: lbl for lbl in store.get("labels", [])}
            row["tickets_labels"] = [
                {"label": deepcopy(labels.get(link["label_id"]))}
                for link in store.get("tickets_labels", [])
                if link.get("ticket_id") == row["id"]
            ]
        return row

    def execute(self) -> MockSupabaseResponse:
        """Execute the query and return results."""
        self._client.calls.append((self.table_name, self._op))

        failure = self._client.failures.get((self.table_name, self._op))
        if failure is not None:
            raise APIError(dict(failure))

        rows = self._client.store.setdefault(self.table_name, [])

        if self._op == "insert":
            inserted = []
            for item in self._payload:
                item = dict(item)
                item.setdefault("id", str(uuid.uuid4()))
                item.setdefault("created_at", datetime.now(timezone.utc).isoformat())
                if self.table_name == "tickets":
                    item.setdefault("status", "open")
                    item.setdefault("updated_at", item["created_at"])
                rows.append(item)
                inserted.append(deepcopy(item))
            return MockSupabaseResponse(data=inserted)

        if self._op == "update":
            updated = []
            for row in rows:
                if self._matches(row):
                    row.update(self._payload)
                    updated.append(deepcopy(row))
            return MockSupabaseResponse(data=updated)

        data = [self._embed(row) for row in rows if self._matches(row)]
        if self._order_by:
            column, desc = self._order_by
            data.sort(key=lambda r: r.get(column) or "", reverse=desc)
        if self._limit:
            data = data[:self._limit]

        if self._single:
            if len(data) != 1:
                raise APIError({
                    "message": "JSON object requested, multiple (or no) rows returned",
                    "code": "PGRST116",
                    "details": f"The result contains {len(data)} rows",
                    "hint": None,
                })
            return MockSupabaseResponse(data=data[0])
        return MockSupabaseResponse(data=data)


class MockSupabaseAuth:
    """Mock of client.auth: token lookup and magic links."""

    def __init__(self):
        self.users: Dict[str, SimpleNamespace] = {}
        self.otp_requests: List[Dict] = []

    def add_token(self, token: str, user_id: str, email: str = None):
        self.users[token] = SimpleNamespace(id=user_id, email=email)

    def get_user(self, jwt: str = None):
        user = self.users.get(jwt)
        return SimpleNamespace(user=user) if user else None

    def sign_in_with_otp(self, credentials: Dict):
        self.otp_requests.append(credentials)
        return SimpleNamespace(user=None, session=None)


class MockSupabaseClient:
    """Mock Supabase client for testing."""

    def __init__(self):
        self.store: Dict[str, List[Dict]] = {}
        self.calls: List[Tuple[str, str]] = []
        self.failures: Dict[Tuple[str, str], Dict] = {}
        self.auth = MockSupabaseAuth()

    def table(self, name: str) -> MockSupabaseTable:
        return MockSupabaseTable(name, self)

    def seed_data(self, table_name: str, data: List[Dict]):
        """Seed test data into a table."""
        self.store[table_name] = deepcopy(data)

    def fail(self, table_name: str, op: str, message: str, code: str = "42501"):
        """Make the next and all later ``op`` calls on ``table_name`` raise APIError."""
        self.failures[(table_name, op)] = {"message": message, "code": code, "details": None, "hint": None}

    def calls_to(self, table_name: str, op: Optional[str] = None) -> int:
        return sum(1 for t, o in self.calls if t == table_name and (op is None or o == op))

    def clear(self):
        """Clear all test data."""
        self.store.clear()
        self.calls.clear()
        self.failures.clear()


# ============== Sample data ==============

ALICE = "user-alice"
BOB = "user-bob"
GHOST = "user-ghost"  # no profile row

LABEL_BUG = {"id": "label-bug", "name": "bug"}
LABEL_UI = {"id": "label-ui", "name": "ui"}


@pytest.fixture(scope="function")
def mock_supabase() -> MockSupabaseClient:
    """
    Mock Supabase client for testing.

    Stores data in memory and supports the calls TicketDesk issues:
    nested selects, eq/in_/or_ filters, ordering, single, insert, update.
    """
    return MockSupabaseClient()


@pytest.fixture(scope="function")
def mock_supabase_with_data(mock_supabase) -> MockSupabaseClient:
    """Supabase mock with sample data pre-loaded."""
    mock_supabase.seed_data("profiles", [
        {"user_id": ALICE, "display_name": "Alice", "role": "admin"},
        {"user_id": BOB, "display_name": "Bob", "role": "user"},
    ])

    mock_supabase.seed_data("labels", [LABEL_BUG, LABEL_UI])

    mock_supabase.seed_data("tickets", [
        {
            "id": "ticket-1",
            "title": "Login broken",
            "description": "Cannot sign in with magic link",
            "status": "closed",
            "created_by": ALICE,
            "created_at": "2024-01-15T10:00:00+00:00",
            "updated_at": "2024-01-16T10:00:00+00:00",
        },
        {
            "id": "ticket-2",
            "title": "Login broken",
            "description": "Same symptom on mobile",
            "status": "open",
            "created_by": BOB,
            "created_at": "2024-01-17T10:00:00+00:00",
            "updated_at": "2024-01-17T10:00:00+00:00",
        },
        {
            "id": "ticket-3",
            "title": "Dark mode",
            "description": "Settings page ignores the LOGIN theme",
            "status": "open",
            "created_by": GHOST,
            "created_at": "2024-01-18T10:00:00+00:00",
            "updated_at": "2024-01-18T10:00:00+00:00",
        },
    ])

    mock_supabase.seed_data("comments", [
        {
            "id": "comment-1",
            "ticket_id": "ticket-1",
            "author_id": BOB,
            "body": "Still happening",
            "created_at": "2024-01-15T11:00:00+00:00",
        },
        {
            "id": "comment-2",
            "ticket_id": "ticket-1",
            "author_id": GHOST,
            "body": "Me too",
            "created_at": "2024-01-15T12:00:00+00:00",
        },
    ])

    mock_supabase.seed_data("tickets_labels", [
        {"ticket_id": "ticket-1", "label_id": LABEL_BUG["id"]},
        {"ticket_id": "ticket-1", "label_id": LABEL_UI["id"]},
        {"ticket_id": "ticket-2", "label_id": LABEL_BUG["id"]},
        {"ticket_id": "ticket-3", "label_id": "label-deleted"},
    ])

    mock_supabase.calls.clear()
    return mock_supabase


@pytest.fixture
def caller() -> Caller:
    return Caller(user_id=ALICE, email="alice@example.com", access_token="alice-token")


@pytest.fixture
def service(mock_supabase_with_data):
    """TicketService wired to the seeded mock."""
    return get_ticket_service(mock_supabase_with_data)


# ============== FastAPI Client Fixtures ==============

@pytest.fixture(scope="function")
def client_with_data(mock_supabase_with_data) -> Generator[TestClient, None, None]:
    """
    FastAPI test client with pre-loaded test data.

    Both the anon client and caller-scoped clients resolve to the mock;
    ``alice-token`` authenticates as Alice.
    """
    mock_supabase_with_data.auth.add_token("alice-token", ALICE, "alice@example.com")
    with patch("ticketdesk.infrastructure.supabase_client.require_supabase_client",
               return_value=mock_supabase_with_data):
        with patch("ticketdesk.infrastructure.supabase_client.create_user_client",
                   return_value=mock_supabase_with_data):
            with TestClient(app) as test_client:
                yield test_client


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    return {"Authorization": "Bearer alice-token"}
