from mongowrap.core.base.mongowrap_base import MongoWrap, MongoWrapABC, MongoWrapMeta

__all__ = ["MongoWrap", "MongoWrapABC", "MongoWrapMeta"]
