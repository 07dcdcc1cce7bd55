class MongoWrapError(Exception):
    """Base class for all errors raised by mongowrap."""


class InvalidURIError(MongoWrapError):
    """Raised when a connection URI cannot be parsed."""


class ConnectionFailedError(MongoWrapError):
    """Raised when the database endpoint is unreachable, refuses the connection or rejects the credentials."""


class OperationFailedError(MongoWrapError):
    """Raised when a database operation fails after a connection was requested."""


class InsertFailedError(OperationFailedError):
    """Raised when a document cannot be written."""


class DuplicateInsertError(InsertFailedError):
    """Raised when an insert violates a unique index."""


class FindFailedError(OperationFailedError):
    """Raised when a query cannot be executed."""


class RemoveFailedError(OperationFailedError):
    """Raised when documents cannot be deleted."""
