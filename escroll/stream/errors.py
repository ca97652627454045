"""Errors delivered through a ScrollStream's error channel."""


class ScrollStreamError(Exception):
    """Base class for all terminal scroll stream failures.

    Attributes:
        message: Human-readable description.
        total:   Total hit count reported by the server at the time of failure.
        counter: Number of records emitted before the failure.
    """

    def __init__(self, message: str, total: int = 0, counter: int = 0) -> None:
        super().__init__(message)
        self.message = message
        self.total = total
        self.counter = counter


class ScrollClientError(ScrollStreamError):
    """The search client failed or returned an unusable response."""

    def __init__(self, message: str, cause: BaseException, total: int = 0, counter: int = 0) -> None:
        super().__init__(message, total=total, counter=counter)
        self.cause = cause
        self.__cause__ = cause


class ScrollTimeoutError(ScrollStreamError):
    """The server reported that the scroll request timed out."""

    timed_out = True


class ShardFailureError(ScrollStreamError):
    """At least one shard failed to contribute to a page."""

    def __init__(self, message: str, shards: dict, total: int = 0, counter: int = 0) -> None:
        super().__init__(message, total=total, counter=counter)
        self.shards = shards


class IncompleteResultError(ScrollStreamError):
    """The server ran out of hits before reaching its own reported total."""

    def __init__(self, message: str, missing: int, total: int = 0, counter: int = 0) -> None:
        super().__init__(message, total=total, counter=counter)
        self.missing = missing
