from mongowrap.database.backends.document_store import Document, DocumentStore
from mongowrap.database.backends.mongodb import MongoDatabase
from mongowrap.database.core.connection import ConnectionDescriptor, ConnectionState
from mongowrap.database.core.exceptions import (
    ConnectionFailedError,
    DuplicateInsertError,
    FindFailedError,
    InsertFailedError,
    InvalidURIError,
    MongoWrapError,
    OperationFailedError,
    RemoveFailedError,
)

__all__ = [
    "ConnectionDescriptor",
    "ConnectionFailedError",
    "ConnectionState",
    "Document",
    "DocumentStore",
    "DuplicateInsertError",
    "FindFailedError",
    "InsertFailedError",
    "InvalidURIError",
    "MongoDatabase",
    "MongoWrapError",
    "OperationFailedError",
    "RemoveFailedError",
]
