"""Core pipeline data model.

A Stream is what flows between stages: a lazy, one-shot sequence of items
(runes or tokens) followed by exactly one terminal Status.

Contract:
- iterate the data to exhaustion first, then read `status`
- reading `status` early raises StreamProtocolError
- a consumer that stops early calls `close()`; closing propagates upstream so
  no producer is left suspended

Stages produce Streams from generators whose *return value* is the Status, so
the "all data before the status" ordering holds by construction.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Generator, Generic, Iterator, List, Optional, Tuple, TypeVar

from ..errors import CleanTextError, StreamProtocolError

T = TypeVar("T")


@dataclass(frozen=True)
class Status:
    """Terminal status of a stream. No error means clean end."""

    error: Optional[CleanTextError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def clean(cls) -> "Status":
        return CLEAN_END

    @classmethod
    def failed(cls, error: CleanTextError) -> "Status":
        return cls(error)

    def raise_for_status(self) -> None:
        if self.error is not None:
            raise self.error

    def __str__(self) -> str:
        if self.error is None:
            return "clean end"
        return f"{type(self.error).__name__}: {self.error}"


CLEAN_END = Status()


class Stream(Generic[T]):
    """Lazy data sequence plus a guaranteed terminal Status."""

    def __init__(self, producer: Generator[T, None, Status], upstream: Optional["Stream"] = None):
        self._producer = producer
        self._upstream = upstream
        self._status: Optional[Status] = None
        self._closed = False

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        if self._status is not None or self._closed:
            raise StopIteration
        try:
            return next(self._producer)
        except StopIteration as stop:
            if not isinstance(stop.value, Status):
                raise StreamProtocolError(f"producer ended without a Status (got {stop.value!r})") from None
            self._status = stop.value
            raise StopIteration from None

    @property
    def exhausted(self) -> bool:
        return self._status is not None

    @property
    def status(self) -> Status:
        if self._status is None:
            if self._closed:
                raise StreamProtocolError("stream was closed before the data was drained")
            raise StreamProtocolError("status requested before the data was fully drained")
        return self._status

    def close(self) -> None:
        """Abandon the stream and every stream upstream of it."""
        if self._closed:
            return
        self._closed = True
        self._producer.close()
        if self._upstream is not None:
            self._upstream.close()

    def __enter__(self) -> "Stream[T]":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def drain(self) -> Tuple[List[T], Status]:
        items = list(self)
        return items, self.status

    def read_text(self) -> str:
        """Join the remaining data; raise the failure if the stream did not end cleanly."""
        text = "".join(self)
        self.status.raise_for_status()
        return text
