# kvcache/services/errors.py


class CacheError(Exception):
    """Base class for store errors. str(err) is the message sent to clients."""

    message = "cache error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class InvalidTTL(CacheError):
    message = "invalid ttl value"


class KeyNotFound(CacheError):
    message = "key not found"


class WrongType(CacheError):
    message = "wrong type"


class NoItems(CacheError):
    message = "no items"
