from typing import List, Sequence


class SyncError(Exception):
    """Base error for every automation failure."""


class RecordNotFound(SyncError):
    pass


class MissingFieldError(SyncError):
    pass


class UnmappedSkuError(SyncError):
    pass


class ImmutableFieldError(SyncError):
    def __init__(self, message: str, changes: Sequence = ()):
        super().__init__(message)
        self.changes = list(changes)


class MatchError(SyncError):
    """Zero or several records matched where exactly one is required."""

    def __init__(self, message: str, record_ids: Sequence[str] = ()):
        super().__init__(message)
        self.record_ids: List[str] = list(record_ids)
