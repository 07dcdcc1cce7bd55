from mongowrap.core.utils.checks import ifnone
from mongowrap.core.config import Config, CoreConfig
from mongowrap.core.base import MongoWrap, MongoWrapABC, MongoWrapMeta
from mongowrap.core.logging.logger import setup_logger

setup_logger()  # Initialize the default logger

__all__ = [
    "Config",
    "CoreConfig",
    "ifnone",
    "MongoWrap",
    "MongoWrapABC",
    "MongoWrapMeta",
]
