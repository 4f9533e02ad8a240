from __future__ import annotations

import threading

from typing import Callable, Generic, Iterator, List, Optional, TypeVar

from rotina.exceptions import StreamClosed

T = TypeVar("T")
U = TypeVar("U")

_NOTHING = object()


class Stream(Generic[T]):
    """
    One subscriber's view of a sequence of values.

    A stream only ever holds the latest value it has not handed out yet, so a
    slow reader skips intermediate values but always sees the most recent one.
    """

    def __init__(self, on_close: Optional[Callable[[Stream], None]] = None):
        self._condition = threading.Condition()
        self._pending = _NOTHING
        self._closed = False
        self._on_close = on_close

    @property
    def closed(self) -> bool:
        return self._closed

    def push(self, value: T) -> None:
        with self._condition:
            if self._closed:
                return
            self._pending = value
            self._condition.notify_all()

    def get(self, timeout: Optional[float] = None) -> T:
        """
        Return the next undelivered value, waiting for one if necessary.
        Raises:
            TimeoutError: If nothing arrives within `timeout` seconds.
            StreamClosed: If the stream is closed.
        """
        with self._condition:
            ready = self._condition.wait_for(
                lambda: self._closed or self._pending is not _NOTHING, timeout)
            if self._closed:
                raise StreamClosed("Stream is closed.")
            if not ready:
                raise TimeoutError(f"No value within {timeout} seconds.")
            value, self._pending = self._pending, _NOTHING
            return value

    def close(self) -> None:
        with self._condition:
            if self._closed:
                return
            self._closed = True
            self._pending = _NOTHING
            self._condition.notify_all()
        if self._on_close:
            self._on_close(self)

    def map(self, fn: Callable[[T], U]) -> Stream[U]:
        return MappedStream(self, fn)

    def __iter__(self) -> Iterator[T]:
        while True:
            try:
                yield self.get()
            except StreamClosed:
                return

    def __enter__(self) -> Stream[T]:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class MappedStream(Stream[U]):
    """A stream that applies a function to every value of another stream."""

    def __init__(self, upstream: Stream[T], fn: Callable[[T], U]):
        self._upstream = upstream
        self._fn = fn

    @property
    def closed(self) -> bool:
        return self._upstream.closed

    def push(self, value):
        raise TypeError("Values reach a mapped stream through its upstream.")

    def get(self, timeout: Optional[float] = None) -> U:
        return self._fn(self._upstream.get(timeout))

    def close(self) -> None:
        self._upstream.close()


class Broadcaster(Generic[T]):
    """Fans every published value out to all live subscribers."""

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: List[Stream[T]] = []

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def subscribe(self, initial: T = _NOTHING) -> Stream[T]:
        stream: Stream[T] = Stream(on_close=self._unsubscribe)
        if initial is not _NOTHING:
            stream.push(initial)
        with self._lock:
            self._subscribers.append(stream)
        return stream

    def publish(self, value: T) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for stream in subscribers:
            stream.push(value)

    def _unsubscribe(self, stream: Stream[T]) -> None:
        with self._lock:
            if stream in self._subscribers:
                self._subscribers.remove(stream)
