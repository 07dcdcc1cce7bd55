import logging
import os

import pytest
from pymongo import MongoClient
from pymongo.errors import PyMongoError

from mongowrap.database import ConnectionDescriptor

# Live server settings. Credentials are optional: CI servers usually run without auth.
cfg = {
    "good": {
        "db": os.environ.get("MONGOWRAP_TEST_DB", "database"),
        "user": os.environ.get("MONGOWRAP_TEST_USER"),
        "auth": os.environ.get("MONGOWRAP_TEST_AUTH"),
        "host": os.environ.get("MONGOWRAP_TEST_HOST", "localhost"),
        "port": int(os.environ.get("MONGOWRAP_TEST_PORT", "27017")),
    },
    "bad": {
        "db": "database",
        "user": "database",
        "auth": "database",
        "host": "localhost",
        "port": 27018,
    },
}

# Keep failed connection attempts short
FAST_FAIL = {"serverSelectionTimeoutMS": 1000, "connectTimeoutMS": 1000}


def descriptor_for(target: dict) -> ConnectionDescriptor:
    if target["user"]:
        return ConnectionDescriptor.from_parts(
            target["user"], target["auth"] or "", target["host"], target["port"], target["db"], debug=True
        )
    uri = f"mongodb://{target['host']}:{target['port']}/{target['db']}"
    return ConnectionDescriptor(uri=uri, db_name=target["db"], debug=True)


@pytest.fixture(scope="session")
def good_descriptor() -> ConnectionDescriptor:
    return descriptor_for(cfg["good"])


@pytest.fixture(scope="session")
def bad_descriptor() -> ConnectionDescriptor:
    return descriptor_for(cfg["bad"])


@pytest.fixture(scope="session")
def live_server(good_descriptor):
    """Skip tests that need a running MongoDB when none answers on the configured port."""
    client = MongoClient(good_descriptor.uri, **FAST_FAIL)
    try:
        client[good_descriptor.db_name].command("ping")
    except PyMongoError as e:
        pytest.skip(f"MongoDB not reachable at {good_descriptor.redacted_uri}: {e}")
    finally:
        client.close()
    yield good_descriptor
    cleanup = MongoClient(good_descriptor.uri, **FAST_FAIL)
    try:
        cleanup[good_descriptor.db_name].drop_collection("mongowrap_integration")
    finally:
        cleanup.close()


@pytest.fixture(autouse=True, scope="session")
def suppress_pymongo_logs():
    """Suppress PyMongo debug logging that can cause issues during cleanup."""
    loggers_to_suppress = [
        "pymongo",
        "pymongo.topology",
        "pymongo.connection",
        "pymongo.serverSelection",
    ]

    original_levels = {}
    for logger_name in loggers_to_suppress:
        logger = logging.getLogger(logger_name)
        original_levels[logger_name] = logger.level
        logger.setLevel(logging.CRITICAL)

    yield

    for logger_name, original_level in original_levels.items():
        logging.getLogger(logger_name).setLevel(original_level)
