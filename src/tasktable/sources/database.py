"""Chroma-based persistence for the embedded task source."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Iterable, Protocol

from ..errors import StorageFailure

# Records are looked up by id only; every record shares one placeholder
# vector so the collection never needs an embedding model.
_PLACEHOLDER_EMBEDDING = [1.0]


class CollectionProtocol(Protocol):
    """Protocol for the minimal Chroma collection API used by the task database."""

    def upsert(
        self,
        *,
        ids: Iterable[str],
        documents: Iterable[str],
        metadatas: Iterable[dict[str, Any]],
        embeddings: Iterable[list[float]],
    ) -> None:
        ...

    def get(
        self,
        *,
        ids: Iterable[str] | None = None,
        where: dict[str, Any] | None = None,
        limit: int | None = None,
    ) -> dict[str, list[Any]]:
        ...


class ClientProtocol(Protocol):
    """Protocol for the minimal Chroma client API used by the task database."""

    def get_or_create_collection(self, name: str) -> CollectionProtocol:
        ...


class TaskDatabase:
    """Store task documents in a persistent Chroma collection.

    Documents are the JSON form of a task keyed by uuid. The database does not
    interpret them beyond indexing ``status`` and ``project`` as metadata.
    """

    def __init__(
        self,
        path: Path,
        *,
        collection_name: str = "tasks",
        client_factory: Callable[[], ClientProtocol] | None = None,
    ) -> None:
        self._path = Path(path)
        try:
            self._path.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageFailure(f"Unable to create task database directory {self._path}: {exc}") from exc
        self._collection_name = collection_name
        self._client_factory = client_factory or self._default_client_factory
        self._client: ClientProtocol | None = None
        self._collection: CollectionProtocol | None = None

    @property
    def path(self) -> Path:
        return self._path

    def _default_client_factory(self) -> ClientProtocol:
        try:
            import chromadb
        except ImportError as exc:  # pragma: no cover - depends on environment
            raise StorageFailure("chromadb package is not installed") from exc

        return chromadb.PersistentClient(path=str(self._path))

    def _ensure_collection(self) -> CollectionProtocol:
        if self._collection is None:
            try:
                client = self._client or self._client_factory()
                self._client = client
                self._collection = client.get_or_create_collection(self._collection_name)
            except StorageFailure:
                raise
            except Exception as exc:
                raise StorageFailure(f"Unable to open task database at {self._path}: {exc}") from exc
        return self._collection

    def ping(self) -> bool:
        """Verify that the underlying collection can be obtained."""

        self._ensure_collection()
        return True

    def _documents(self, result: dict[str, list[Any]]) -> list[str]:
        return [document for document in result.get("documents") or [] if document is not None]

    def all(self) -> list[str]:
        """Return every stored task document."""

        collection = self._ensure_collection()
        try:
            result = collection.get()
        except Exception as exc:
            raise StorageFailure(f"Failed to enumerate tasks: {exc}") from exc
        return self._documents(result)

    def get(self, uuid: str) -> str | None:
        collection = self._ensure_collection()
        try:
            result = collection.get(ids=[uuid])
        except Exception as exc:
            raise StorageFailure(f"Failed to read task {uuid}: {exc}") from exc
        documents = self._documents(result)
        return documents[0] if documents else None

    def put(self, uuid: str, document: dict[str, Any]) -> None:
        collection = self._ensure_collection()
        metadata = {
            "status": str(document.get("status", "")),
            "project": str(document.get("project") or ""),
        }
        try:
            collection.upsert(
                ids=[uuid],
                documents=[json.dumps(document)],
                metadatas=[metadata],
                embeddings=[_PLACEHOLDER_EMBEDDING],
            )
        except Exception as exc:
            raise StorageFailure(f"Failed to write task {uuid}: {exc}") from exc


__all__ = ["ClientProtocol", "CollectionProtocol", "TaskDatabase"]
