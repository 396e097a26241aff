# src/horus/errors.py

"""Error kinds raised by the stores and the start-up sequence."""

from __future__ import annotations


class HorusError(Exception):
    """Base class for all errors raised by horus."""


class NotFound(HorusError):
    """An operation referenced an id with no matching record."""

    def __init__(self, kind: str, record_id: int) -> None:
        super().__init__(f"{kind} id={record_id} not found")
        self.kind = kind
        self.record_id = record_id


class ConstraintViolation(HorusError):
    """A write was rejected: blank title, unknown date id, date still owning tasks."""


class StorageUnavailable(HorusError):
    """The embedded database could not be opened or initialised."""


class RolloverError(HorusError):
    """No active date could be established at start-up."""
