from __future__ import annotations

import json
from collections import defaultdict
from pathlib import Path
from typing import Any

import pytest

from tasktable.errors import StorageFailure
from tasktable.sources import TaskDatabase


class StubCollection:
    def __init__(self) -> None:
        self.records: dict[str, tuple[str, dict[str, Any]]] = {}
        self.embeddings: list[list[float]] = []

    def upsert(self, *, ids, documents, metadatas, embeddings) -> None:  # type: ignore[override]
        for record_id, document, metadata, embedding in zip(ids, documents, metadatas, embeddings):
            self.records[record_id] = (document, dict(metadata))
            self.embeddings.append(embedding)

    def get(self, *, ids=None, where=None, limit=None):  # type: ignore[override]
        selected = list(self.records.items())
        if ids is not None:
            selected = [(key, value) for key, value in selected if key in ids]
        if where:
            for key, expected in where.items():
                selected = [(k, v) for k, v in selected if v[1].get(key) == expected]
        if limit is not None:
            selected = selected[:limit]
        return {
            "ids": [key for key, _ in selected],
            "documents": [value[0] for _, value in selected],
            "metadatas": [value[1] for _, value in selected],
        }


class StubClient:
    def __init__(self) -> None:
        self.collections = defaultdict(StubCollection)

    def get_or_create_collection(self, name: str) -> StubCollection:
        return self.collections[name]


class BrokenCollection(StubCollection):
    def upsert(self, **kwargs) -> None:  # type: ignore[override]
        raise RuntimeError("disk full")


def test_put_and_get(tmp_path: Path) -> None:
    client = StubClient()
    database = TaskDatabase(tmp_path / "db", client_factory=lambda: client)

    database.put("abc", {"uuid": "abc", "status": "pending", "description": "x"})
    database.put("def", {"uuid": "def", "status": "completed", "project": "home"})

    assert (tmp_path / "db").is_dir()
    assert json.loads(database.get("abc"))["description"] == "x"
    assert database.get("missing") is None
    assert len(database.all()) == 2

    collection = client.collections["tasks"]
    assert collection.records["def"][1] == {"status": "completed", "project": "home"}
    assert collection.embeddings[0] == [1.0]


def test_put_replaces_existing_document(tmp_path: Path) -> None:
    database = TaskDatabase(tmp_path, client_factory=lambda: StubClient())

    database.put("abc", {"status": "pending"})
    database.put("abc", {"status": "completed"})

    assert database.all() == [json.dumps({"status": "completed"})]


def test_client_failure_becomes_storage_failure(tmp_path: Path) -> None:
    def factory():
        raise RuntimeError("database is locked")

    database = TaskDatabase(tmp_path, client_factory=factory)

    with pytest.raises(StorageFailure):
        database.ping()


def test_write_failure_becomes_storage_failure(tmp_path: Path) -> None:
    client = StubClient()
    client.collections["tasks"] = BrokenCollection()
    database = TaskDatabase(tmp_path, client_factory=lambda: client)

    with pytest.raises(StorageFailure) as excinfo:
        database.put("abc", {"status": "pending"})

    assert "disk full" in str(excinfo.value)


def test_unwritable_directory(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(StorageFailure):
        TaskDatabase(blocker / "db", client_factory=lambda: StubClient())
