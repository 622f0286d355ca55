# tests/conftest.py
"""
Fixtures partagées : un faux client Supabase en mémoire.

Il reproduit le sous-ensemble du query builder utilisé par les CRUD
(select / insert / update, eq / neq / in_, order / range / limit, execute)
pour exercer le vrai code CRUD sans réseau.
"""
import copy
import itertools
import os
import uuid
from datetime import datetime, timedelta, timezone

import pytest

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-key")

from app.models import Actor, UserRole  # noqa: E402


class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self.ordering = None
        self.window = None
        self.max_rows = None

    def select(self, columns="*", count=None):
        self.op = "select"
        return self

    def insert(self, data):
        self.op = "insert"
        self.payload = data
        return self

    def update(self, data):
        self.op = "update"
        self.payload = data
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def neq(self, column, value):
        self.filters.append(lambda row: row.get(column) != value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def order(self, column, desc=False):
        self.ordering = (column, desc)
        return self

    def range(self, start, end):
        self.window = (start, end)
        return self

    def limit(self, count):
        self.max_rows = count
        return self

    def _matching(self):
        rows = self.db.tables.setdefault(self.table, [])
        return [row for row in rows if all(f(row) for f in self.filters)]

    def execute(self):
        self.db.calls.append((self.table, self.op))
        failure = self.db.failures.pop((self.table, self.op), None)
        if failure is not None:
            raise failure

        if self.op == "insert":
            row = copy.deepcopy(self.payload)
            row.setdefault("id", str(uuid.uuid4()))
            stamp = self.db.next_timestamp()
            row.setdefault("created_at", stamp)
            row.setdefault("updated_at", stamp)
            self.db.tables.setdefault(self.table, []).append(row)
            return FakeResponse([copy.deepcopy(row)])

        matched = self._matching()

        if self.op == "update":
            for row in matched:
                row.update(copy.deepcopy(self.payload))
            return FakeResponse([copy.deepcopy(row) for row in matched])

        if self.ordering:
            column, desc = self.ordering
            matched = sorted(matched, key=lambda row: row.get(column) or "", reverse=desc)
        if self.window:
            start, end = self.window
            matched = matched[start:end + 1]
        if self.max_rows is not None:
            matched = matched[:self.max_rows]
        return FakeResponse([copy.deepcopy(row) for row in matched], count=len(matched))


class FakeSupabase:
    """Client Supabase en mémoire (tables = listes de dicts)"""

    def __init__(self):
        self.tables = {}
        self.calls = []
        self.failures = {}
        self._clock = itertools.count()
        self._epoch = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def table(self, name):
        return FakeQuery(self, name)

    def next_timestamp(self):
        return (self._epoch + timedelta(seconds=next(self._clock))).isoformat()

    def fail_next(self, table, op, error=None):
        """La prochaine opération `op` sur `table` lèvera `error`"""
        self.failures[(table, op)] = error or ConnectionError("store unreachable")

    def writes(self):
        return [call for call in self.calls if call[1] in ("insert", "update")]

    def add_room(self, landlord_id="landlord-1", family_status="Any", allowed_gender="Any",
                 title="Sunny room near campus"):
        row = {
            "id": str(uuid.uuid4()),
            "landlord_id": landlord_id,
            "title": title,
            "city": "Pune",
            "tenant_preferences": {"family_status": family_status, "allowed_gender": allowed_gender},
            "is_available": True,
        }
        self.tables.setdefault("rooms", []).append(row)
        return row


@pytest.fixture()
def fake_db():
    return FakeSupabase()


@pytest.fixture()
def room(fake_db):
    return fake_db.add_room()


@pytest.fixture()
def student():
    return Actor(id="student-1", role=UserRole.STUDENT)


@pytest.fixture()
def other_student():
    return Actor(id="student-2", role=UserRole.STUDENT)


@pytest.fixture()
def landlord():
    return Actor(id="landlord-1", role=UserRole.LANDLORD)


@pytest.fixture()
def request_payload(room):
    return {
        "room_id": room["id"],
        "full_name": "Asha Patil",
        "mobile_number": "9876543210",
        "profile_type": "Student",
        "occupants": {"adults": 2, "children": 0, "males": 1, "females": 1},
        "check_in_date": "2025-03-01",
        "check_out_date": "2025-06-01",
        "message": "Looking for a quiet place for the semester.",
    }
