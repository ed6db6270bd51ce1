"""Shared fixtures: in-memory stores standing in for Supabase, and a fixed clock."""
import copy
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from src.errors import ConcurrentUpdateError, MaterialNotFoundError, StoreError

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class InMemoryRecordStore:
    def __init__(self):
        self.rows = {}
        self.calls = []
        self.fail_on = set()  # method names that raise StoreError

    def _call(self, name):
        self.calls.append(name)
        if name in self.fail_on:
            raise StoreError(f"{name} unavailable")

    def list_all(self):
        self._call("list_all")
        return [copy.deepcopy(r) for r in reversed(list(self.rows.values()))]

    def get(self, material_id):
        self._call("get")
        if material_id not in self.rows:
            raise MaterialNotFoundError(material_id)
        return copy.deepcopy(self.rows[material_id])

    def insert(self, fields):
        self._call("insert")
        row = {**copy.deepcopy(fields), "id": str(uuid4())}
        self.rows[row["id"]] = row
        return copy.deepcopy(row)

    def update(self, material_id, fields, expected_revision_count=None):
        self._call("update")
        if material_id not in self.rows:
            raise MaterialNotFoundError(material_id)
        row = self.rows[material_id]
        if expected_revision_count is not None and row["revision_count"] != expected_revision_count:
            raise ConcurrentUpdateError(material_id, expected_revision_count)
        row.update(copy.deepcopy(fields))
        return copy.deepcopy(row)

    def delete(self, material_id):
        self._call("delete")
        if material_id not in self.rows:
            raise MaterialNotFoundError(material_id)
        del self.rows[material_id]


class InMemoryBlobStore:
    def __init__(self):
        self.objects = {}
        self.calls = []
        self.fail_on = set()

    def _call(self, name):
        self.calls.append(name)
        if name in self.fail_on:
            raise StoreError(f"{name} unavailable")

    def upload(self, key, data, content_type):
        self._call("upload")
        self.objects[key] = (data, content_type)

    def delete(self, key):
        self._call("delete")
        self.objects.pop(key, None)

    def public_url(self, key):
        return f"https://example.supabase.co/storage/v1/object/public/pdfs/{key}"


def make_material(days_ago=0, last_score=None, revision_count=0, filename="notes.pdf", now=NOW, **extra):
    """Material row as the record store returns it."""
    revised = (now - timedelta(days=days_ago)).isoformat()
    history = [{"date": revised, "score": last_score or 2} for _ in range(revision_count)]
    return {
        "id": str(uuid4()),
        "filename": filename,
        "storage_path": f"1700000000000_abcd1234_{filename}",
        "date_added": revised,
        "last_revised": revised,
        "revision_count": revision_count,
        "last_score": last_score,
        "revision_history": history,
        **extra,
    }


@pytest.fixture
def records():
    return InMemoryRecordStore()


@pytest.fixture
def blobs():
    return InMemoryBlobStore()


@pytest.fixture
def service(records, blobs):
    from src.service import RevisionService

    return RevisionService(records, blobs, clock=lambda: NOW)
