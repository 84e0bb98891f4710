"""Sequence helpers shared by the resolver and mutator."""

from .memoizing import MemoizingSequence, memoize

__all__ = ["MemoizingSequence", "memoize"]
