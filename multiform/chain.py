from __future__ import annotations

import threading

from typing import Any, Iterable, Iterator, Tuple

from . import log
from .writers import Writer


class WriterChain:
    """
    Ordered registry of writers. For each value the first writer whose `is_applicable()` accepts it wins, so order
    matters: more specific writers must come before generic ones. Values no writer accepts go to `fallback`.

    Mutations are serialised with a lock and `dispatch()` scans a snapshot, but reconfiguring while an encode pass
    is running still changes which writers later fields see. Configure the chain before sharing it between threads.
    """

    def __init__(self, fallback: Writer, writers: Iterable[Writer] = ()):
        self.fallback = fallback
        self._writers = list(writers)
        self._lock = threading.RLock()

    def dispatch(self, value: Any) -> Writer:
        for writer in self.snapshot():
            if writer.is_applicable(value):
                log.debug("dispatching %s to %s", type(value).__name__, type(writer).__name__)
                return writer

        log.debug("no writer for %s, using fallback %s", type(value).__name__, type(self.fallback).__name__)
        return self.fallback

    def append(self, writer: Writer):
        with self._lock:
            self._writers.append(writer)

    def prepend(self, writer: Writer):
        with self._lock:
            self._writers.insert(0, writer)

    def replace_at(self, index: int, writer: Writer):
        with self._lock:
            if not -len(self._writers) <= index < len(self._writers):
                raise IndexError(f"Writer index {index} out of range, chain has {len(self._writers)} writers")
            self._writers[index] = writer

    def snapshot(self) -> Tuple[Writer, ...]:
        """Returns a read-only copy of the current writer order"""
        with self._lock:
            return tuple(self._writers)

    def __len__(self) -> int:
        return len(self._writers)

    def __iter__(self) -> Iterator[Writer]:
        return iter(self.snapshot())
