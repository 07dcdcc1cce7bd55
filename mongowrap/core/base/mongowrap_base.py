"""MongoWrap base class. Provides unified configuration, logging and context management."""

import inspect
import logging
import time
import traceback
from abc import ABC, ABCMeta
from functools import wraps
from typing import Callable, Optional

from mongowrap.core.config import CoreConfig, SettingsLike
from mongowrap.core.logging.logger import get_logger
from mongowrap.core.utils import ifnone

LOGGER_PARAM_NAMES = {
    "log_dir",
    "logger_level",
    "stream_level",
    "file_level",
    "file_mode",
    "propagate",
    "max_bytes",
    "backup_count",
    "use_structlog",
    "structlog_json",
}


class MongoWrapMeta(type):
    """Metaclass for MongoWrap class.

    Lets classes deriving from MongoWrap use the same default logger within class methods as within
    instance methods::

        from mongowrap.core import MongoWrap

        class MyClass(MongoWrap):
            def instance_method(self):
                self.logger.info(f"Using logger: {self.logger.name}")  # mongowrap.my_module.MyClass

            @classmethod
            def class_method(cls):
                cls.logger.info(f"Using logger: {cls.logger.name}")  # mongowrap.my_module.MyClass
    """

    def __init__(cls, name, bases, attr_dict):
        super().__init__(name, bases, attr_dict)
        cls._logger = None
        cls._config = None

    @property
    def logger(cls):
        if cls._logger is None:
            cls._logger = get_logger(cls.unique_name)
        return cls._logger

    @logger.setter
    def logger(cls, new_logger):
        cls._logger = new_logger

    @property
    def unique_name(self) -> str:
        return self.__module__ + "." + self.__name__

    @property
    def config(cls):
        if cls._config is None:
            cls._config = CoreConfig()
        return cls._config

    @config.setter
    def config(cls, new_config):
        cls._config = new_config


class MongoWrap(metaclass=MongoWrapMeta):
    """Base class for all mongowrap classes.

    Adds a per-class logger, a `CoreConfig` instance and default context manager behavior. All classes
    deriving from MongoWrap log in a unified format.

    Args:
        suppress: Whether to suppress exceptions in context manager use.
        config_overrides: Additional settings layered over the default config.
        **kwargs: Logger-related kwargs are passed to `get_logger`. Valid logger kwargs: log_dir,
            logger_level, stream_level, file_level, file_mode, propagate, max_bytes, backup_count,
            use_structlog, structlog_json.
    """

    def __init__(self, suppress: bool = False, *, config_overrides: SettingsLike | None = None, **kwargs):
        self.config = CoreConfig(config_overrides)
        super().__init__(**{k: v for k, v in kwargs.items() if k not in LOGGER_PARAM_NAMES})

        self.suppress = suppress
        logger_kwargs = {k: v for k, v in kwargs.items() if k in LOGGER_PARAM_NAMES}
        self.logger = get_logger(self.unique_name, **logger_kwargs)

    @property
    def unique_name(self) -> str:
        return self.__module__ + "." + type(self).__name__

    @property
    def name(self) -> str:
        return type(self).__name__

    def __enter__(self):
        self.logger.debug(f"Initializing {self.name} as a context manager.")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.logger.debug(f"Exiting context manager for {self.name}.")
        if exc_type is not None:
            info = (exc_type, exc_val, exc_tb)
            self.logger.exception("Exception occurred", exc_info=info)
            return self.suppress
        return False

    @classmethod
    def autolog(
        cls,
        log_level=logging.DEBUG,
        prefix_formatter: Optional[Callable] = None,
        suffix_formatter: Optional[Callable] = None,
        exception_formatter: Optional[Callable] = None,
        include_duration: bool = True,
        enabled: Optional[Callable] = None,
    ):
        """Decorator that logs a method call before and after it runs.

        By default, logs the method name and arguments before the call and the method name and result
        after it completes. Exceptions are logged at ERROR with their stack trace and re-raised. Works
        for both regular and ``async def`` methods. The decorator expects a logger at ``self.logger``.

        Args:
            log_level: The level passed to ``logger.log()`` for the start and finish records.
            prefix_formatter: ``(function, args, kwargs) -> str`` for the record before the call.
            suffix_formatter: ``(function, result) -> str`` for the record after the call.
            exception_formatter: ``(function, error, stack_trace) -> str`` for failures.
            include_duration: If True, append the duration of the wrapped method to finish records.
            enabled: Optional ``(self) -> bool``; when it returns False the start and finish records
                are skipped. Failures are always logged.

        Example::

            from mongowrap.core import MongoWrap

            class Calculator(MongoWrap):
                @MongoWrap.autolog()
                def divide(self, a, b):
                    return a / b

            Calculator().divide(1, 0)

        The resulting log file should contain something similar to the following:

        .. code-block:: text

            Calculator - DEBUG - Operation divide started with args: (1, 0) and kwargs: {}
            Calculator - ERROR - Operation divide failed with the following error: division by zero
            Traceback (most recent call last):
            ...
        """
        prefix_formatter = ifnone(
            prefix_formatter,
            default=lambda function,
            args,
            kwargs: f"Operation {function.__name__} started with args: {args} and kwargs: {kwargs}",
        )
        suffix_formatter = ifnone(
            suffix_formatter,
            default=lambda function, result: f"Operation {function.__name__} completed with result: {result}",
        )
        exception_formatter = ifnone(
            exception_formatter,
            default=lambda function,
            e,
            stack_trace: f"Operation {function.__name__} failed with the following error: {e}\n{stack_trace}",
        )

        def _with_duration(msg: str, started_at: float | None) -> str:
            if include_duration and started_at is not None:
                return f"{msg} | duration_ms={(time.perf_counter() - started_at) * 1000.0:.2f}"
            return msg

        def decorator(function):
            def _before(instance, args, kwargs):
                verbose = enabled is None or enabled(instance)
                if verbose:
                    instance.logger.log(log_level, prefix_formatter(function, args, kwargs))
                return verbose, (time.perf_counter() if include_duration else None)

            def _failed(instance, e, started_at):
                msg = exception_formatter(function, e, traceback.format_exc())
                instance.logger.error(_with_duration(msg, started_at))

            def _finished(instance, verbose, result, started_at):
                if verbose:
                    instance.logger.log(log_level, _with_duration(suffix_formatter(function, result), started_at))

            if inspect.iscoroutinefunction(function):

                @wraps(function)
                async def wrapper(self, *args, **kwargs):
                    verbose, started_at = _before(self, args, kwargs)
                    try:
                        result = await function(self, *args, **kwargs)
                    except Exception as e:
                        _failed(self, e, started_at)
                        raise
                    _finished(self, verbose, result, started_at)
                    return result

            else:

                @wraps(function)
                def wrapper(self, *args, **kwargs):
                    verbose, started_at = _before(self, args, kwargs)
                    try:
                        result = function(self, *args, **kwargs)
                    except Exception as e:
                        _failed(self, e, started_at)
                        raise
                    _finished(self, verbose, result, started_at)
                    return result

            return wrapper

        return decorator


class MongoWrapABCMeta(MongoWrapMeta, ABCMeta):
    """Metaclass that combines MongoWrapMeta and ABCMeta.

    Python only allows a class to have one metaclass, so this combined metaclass lets a class inherit
    from both MongoWrap and ABC without a metaclass conflict.
    """

    pass


class MongoWrapABC(MongoWrap, ABC, metaclass=MongoWrapABCMeta):
    """Abstract base class combining MongoWrap functionality with ABC support.

    Example:
        from abc import abstractmethod
        from mongowrap.core import MongoWrapABC

        class MyAbstractStore(MongoWrapABC):
            @abstractmethod
            async def connect(self):
                '''Must be implemented by concrete subclasses.'''
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
