"""Re-iterable view over a one-shot producer.

Provider operations such as ``resolve_package_sources`` return sequences that
may be expensive to produce (file reads, remote calls) and that are usually
filtered more than once. ``MemoizingSequence`` buffers what the producer yields
on first access and serves every later pass from the buffer, so the producer is
consumed at most once regardless of how many readers walk the sequence.
"""

from __future__ import annotations

import itertools
import threading
from collections.abc import Iterable, Iterator, Sequence
from typing import Any, Generic, TypeVar, overload

T = TypeVar("T")


class MemoizingSequence(Sequence, Generic[T]):
    """Lazily filled, thread-safe, re-iterable sequence.

    ``source`` may be a restartable iterable (its iterator is requested on
    first demand), a one-shot iterator, or ``None`` for an empty sequence.
    Reads of already-buffered indexes take no lock; growing the buffer is
    serialized by a single lock per instance. An error raised by the producer
    is kept and re-raised to every reader that reaches past the buffered items.
    """

    def __init__(self, source: Iterable[T] | None = None) -> None:
        self._items: list[T] = []
        self._lock = threading.Lock()
        self._source: Iterable[T] | None = None
        self._iterator: Iterator[T] | None = None
        self._exhausted = source is None
        self._error: BaseException | None = None
        if isinstance(source, Iterator):
            self._iterator = source
        elif source is not None:
            self._source = source

    @property
    def is_materialized(self) -> bool:
        return self._exhausted

    def has_item_at(self, index: int) -> bool:
        if index < 0:
            raise ValueError("index must be non-negative")
        if index < len(self._items):
            return True
        with self._lock:
            while len(self._items) <= index:
                if self._exhausted:
                    return False
                if self._error is not None:
                    raise self._error
                try:
                    if self._iterator is None:
                        self._iterator = iter(self._source)  # type: ignore[arg-type]
                        self._source = None
                    item = next(self._iterator)
                except StopIteration:
                    # Drop the producer so it is never advanced again.
                    self._exhausted = True
                    self._iterator = None
                    return False
                except Exception as exc:
                    # A failed producer stays failed for every later reader.
                    self._error = exc
                    self._iterator = None
                    raise
                self._items.append(item)
            return True

    def concat(self, other: Iterable[T] | None) -> "MemoizingSequence[T]":
        return MemoizingSequence(itertools.chain(self, other if other is not None else ()))

    def _materialize(self) -> None:
        index = len(self._items)
        while self.has_item_at(index):
            index += 1

    def __iter__(self) -> Iterator[T]:
        index = 0
        while self.has_item_at(index):
            yield self._items[index]
            index += 1

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> list[T]: ...

    def __getitem__(self, index: int | slice) -> Any:
        if isinstance(index, slice):
            start, stop, step = index.start, index.stop, index.step
            bounded = (
                stop is not None
                and stop >= 0
                and (start is None or start >= 0)
                and (step is None or step > 0)
            )
            if bounded:
                if stop > 0:
                    self.has_item_at(stop - 1)
            else:
                self._materialize()
            return self._items[index]
        if index < 0:
            self._materialize()
            return self._items[index]
        if not self.has_item_at(index):
            raise IndexError("MemoizingSequence index out of range")
        return self._items[index]

    def __len__(self) -> int:
        self._materialize()
        return len(self._items)

    def __bool__(self) -> bool:
        return self.has_item_at(0)

    def __repr__(self) -> str:
        state = "materialized" if self._exhausted else "pending"
        return f"MemoizingSequence(buffered={len(self._items)}, {state})"


def memoize(source: Iterable[T] | None) -> MemoizingSequence[T]:
    """Wrap ``source`` unless it already is a ``MemoizingSequence``."""
    if isinstance(source, MemoizingSequence):
        return source
    return MemoizingSequence(source)
