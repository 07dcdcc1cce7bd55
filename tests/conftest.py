import logging
import os
import tempfile

import pytest

# Keep test log files out of the user's cache directory. Must run before mongowrap is imported.
_LOG_ROOT = tempfile.mkdtemp(prefix="mongowrap-tests-")
os.environ.setdefault("MONGOWRAP_DIR_PATHS__LOGGER_DIR", os.path.join(_LOG_ROOT, "logs"))
os.environ.setdefault("MONGOWRAP_DIR_PATHS__STRUCT_LOGGER_DIR", os.path.join(_LOG_ROOT, "structlogs"))


def by_slow_marker(item):
    is_slow = 0 if item.get_closest_marker("slow") is None else 1
    is_integration = 1 if "integration" in str(item.fspath) else 0

    # Unit tests first, then slow unit tests, then integration tests, then slow integration tests
    return (is_integration, is_slow)


def pytest_addoption(parser):
    parser.addoption("--slow-last", action="store_true", default=False)


def pytest_collection_modifyitems(items, config):
    if config.getoption("--slow-last"):
        items.sort(key=by_slow_marker)


@pytest.fixture(autouse=True)
def configure_logging_for_tests(caplog):
    """Configure logging to work properly with caplog fixture.

    Ensures that all mongowrap loggers propagate their messages to the root logger so that caplog can
    capture them.
    """
    caplog.set_level(logging.DEBUG)

    root_logger = logging.getLogger()
    original_level = root_logger.level
    root_logger.setLevel(logging.DEBUG)

    mongowrap_logger = logging.getLogger("mongowrap")
    original_propagate = mongowrap_logger.propagate
    mongowrap_logger.propagate = True

    yield

    root_logger.setLevel(original_level)
    mongowrap_logger.propagate = original_propagate
