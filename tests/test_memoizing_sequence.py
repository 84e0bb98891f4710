from __future__ import annotations

import threading
import time

import pytest

from ppm_core.sequences import MemoizingSequence, memoize


class _CountingIterator:
    def __init__(self, items, *, delay: float = 0.0) -> None:
        self._items = list(items)
        self._index = 0
        self._delay = delay
        self.advances = 0

    def __iter__(self):
        return self

    def __next__(self):
        self.advances += 1
        if self._delay:
            time.sleep(self._delay)
        if self._index >= len(self._items):
            raise StopIteration
        item = self._items[self._index]
        self._index += 1
        return item


class _RestartableIterable:
    def __init__(self, items) -> None:
        self._items = list(items)
        self.iter_calls = 0

    def __iter__(self):
        self.iter_calls += 1
        return iter(self._items)


def test_repeated_enumeration_consumes_producer_once() -> None:
    producer = _CountingIterator(["a", "b", "c"])
    sequence = MemoizingSequence(producer)

    first = [item for item in sequence]
    second = [item for item in sequence]
    third = list(sequence)

    assert first == second == third == ["a", "b", "c"]
    assert producer.advances == 4
    assert sequence.is_materialized


def test_independent_iterators_share_the_buffer() -> None:
    producer = _CountingIterator(range(5))
    sequence = MemoizingSequence(producer)

    left = iter(sequence)
    right = iter(sequence)
    assert next(left) == 0
    assert next(left) == 1
    assert next(right) == 0
    assert list(right) == [1, 2, 3, 4]
    assert list(left) == [2, 3, 4]
    assert producer.advances == 6


def test_has_item_at_grows_only_as_far_as_needed() -> None:
    producer = _CountingIterator(range(10))
    sequence = MemoizingSequence(producer)

    assert sequence.has_item_at(2)
    assert producer.advances == 3
    assert sequence.has_item_at(0)
    assert sequence.has_item_at(2)
    assert producer.advances == 3
    assert not sequence.is_materialized


def test_has_item_at_is_monotone() -> None:
    sequence = MemoizingSequence(iter([1, 2, 3]))

    assert sequence.has_item_at(2)
    assert not sequence.has_item_at(3)
    for index in (2, 1, 0):
        assert sequence.has_item_at(index)
    assert not sequence.has_item_at(3)


def test_has_item_at_rejects_negative_index() -> None:
    with pytest.raises(ValueError):
        MemoizingSequence([1]).has_item_at(-1)


def test_restartable_iterable_is_iterated_lazily_and_once() -> None:
    source = _RestartableIterable([1, 2])
    sequence = MemoizingSequence(source)
    assert source.iter_calls == 0

    assert list(sequence) == [1, 2]
    assert list(sequence) == [1, 2]
    assert source.iter_calls == 1


def test_none_source_is_empty() -> None:
    sequence = MemoizingSequence(None)
    assert not sequence
    assert len(sequence) == 0
    assert list(sequence) == []
    assert sequence.is_materialized


def test_indexing_and_slicing() -> None:
    producer = _CountingIterator("abcdef")
    sequence = MemoizingSequence(producer)

    assert sequence[1] == "b"
    assert producer.advances == 2
    assert sequence[:3] == ["a", "b", "c"]
    assert producer.advances == 3
    assert sequence[-1] == "f"
    assert sequence[::2] == ["a", "c", "e"]
    assert "d" in sequence
    assert sequence.index("e") == 4
    with pytest.raises(IndexError):
        sequence[6]
    assert producer.advances == 7


def test_concat_does_not_materialize_either_side() -> None:
    head_producer = _CountingIterator([1, 2])
    tail_producer = _CountingIterator([3])
    head = MemoizingSequence(head_producer)

    combined = head.concat(tail_producer)
    assert head_producer.advances == 0

    assert combined[0] == 1
    assert head_producer.advances == 1
    assert tail_producer.advances == 0

    assert list(combined) == [1, 2, 3]
    assert list(combined) == [1, 2, 3]
    assert list(head) == [1, 2]
    assert head_producer.advances == 3
    assert tail_producer.advances == 2


def test_concat_with_none_keeps_items() -> None:
    assert list(MemoizingSequence([1]).concat(None)) == [1]


def test_memoize_returns_existing_instance() -> None:
    sequence = MemoizingSequence([1])
    assert memoize(sequence) is sequence
    assert list(memoize(iter([2, 3]))) == [2, 3]


def test_concurrent_readers_see_one_consistent_buffer() -> None:
    def produce():
        for item in range(50):
            time.sleep(0.0005)
            yield item

    calls = {"next": 0}
    generator = produce()

    class _Tracked:
        def __iter__(self):
            return self

        def __next__(self):
            calls["next"] += 1
            return next(generator)

    sequence = MemoizingSequence(_Tracked())
    results: list[list[int]] = []
    errors: list[BaseException] = []

    def reader() -> None:
        try:
            results.append(list(iter(sequence)))
        except BaseException as exc:  # noqa: BLE001 - surfaced through the assertion below
            errors.append(exc)

    threads = [threading.Thread(target=reader) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert len(results) == 8
    assert all(result == list(range(50)) for result in results)
    assert calls["next"] == 51


def test_producer_failure_is_raised_to_every_later_reader() -> None:
    calls = {"next": 0}

    def produce():
        calls["next"] += 1
        yield 1
        calls["next"] += 1
        raise OSError("feed unreachable")

    sequence = MemoizingSequence(produce())

    with pytest.raises(OSError, match="feed unreachable"):
        list(sequence)
    with pytest.raises(OSError, match="feed unreachable"):
        list(sequence)
    with pytest.raises(OSError):
        len(sequence)

    assert sequence[0] == 1
    assert sequence.has_item_at(0)
    assert not sequence.is_materialized
    assert calls["next"] == 2
