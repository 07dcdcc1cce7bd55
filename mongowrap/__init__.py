"""Asynchronous MongoDB client wrapper: connect, insert, find, remove."""

from mongowrap.database import ConnectionDescriptor, MongoDatabase

__all__ = ["ConnectionDescriptor", "MongoDatabase"]
