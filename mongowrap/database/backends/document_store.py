from abc import abstractmethod
from typing import Any, Mapping, Optional, Sequence

from mongowrap.core import MongoWrapABC
from mongowrap.core.utils import is_async_context, run_async

Document = Mapping[str, Any]


class DocumentStore(MongoWrapABC):
    """Abstract interface for a store of schemaless documents.

    Implementations are asynchronous; every operation is a coroutine. The ``*_sync`` methods run the
    matching coroutine on a shared background loop for callers without an event loop of their own.
    """

    @abstractmethod
    def is_async(self) -> bool:
        """Whether the store's operations must be awaited."""

    @abstractmethod
    async def connect(self):
        """Establish the connection. A single attempt per call."""

    @abstractmethod
    async def insert(self, document: Document | Sequence[Document]) -> Any:
        """Persist one document, or several, and return the generated id(s)."""

    @abstractmethod
    async def find(self, query: Optional[Document] = None, **kwargs) -> list[dict]:
        """Return the documents matching ``query``; all documents when it is None."""

    @abstractmethod
    async def remove(self, query: Document) -> int:
        """Delete the documents matching ``query`` and return how many were removed."""

    @abstractmethod
    async def close(self):
        """Release the connection."""

    def _run_sync(self, name: str, *args, **kwargs):
        if is_async_context():
            raise RuntimeError(f"{name}_sync() called from async context. Use await {name}() instead.")
        return run_async(getattr(self, name)(*args, **kwargs))

    def connect_sync(self):
        """Connect synchronously (wrapper around async connect)."""
        return self._run_sync("connect")

    def insert_sync(self, document: Document | Sequence[Document]) -> Any:
        """Insert synchronously (wrapper around async insert)."""
        return self._run_sync("insert", document)

    def find_sync(self, query: Optional[Document] = None, **kwargs) -> list[dict]:
        """Find synchronously (wrapper around async find)."""
        return self._run_sync("find", query, **kwargs)

    def remove_sync(self, query: Document) -> int:
        """Remove synchronously (wrapper around async remove)."""
        return self._run_sync("remove", query)

    def close_sync(self):
        """Close synchronously (wrapper around async close)."""
        return self._run_sync("close")
