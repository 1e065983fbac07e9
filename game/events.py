"""
Scheduled events - delayed effects processed by the main update loop

Each event remembers the phase, phase version and level epoch it was
issued under so the session can drop it if the world moved on.
"""

import heapq
import itertools
from enum import Enum, auto


class EventKind(Enum):
    """Delayed effects"""
    TRANSFORM_COMPLETE = auto()
    STRUGGLE_TIMEOUT = auto()
    JUMPSCARE_END = auto()


class ScheduledEvent:
    """One pending effect"""
    __slots__ = ('fire_at', 'seq', 'kind', 'issued_phase', 'version', 'epoch', 'payload')

    def __init__(self, fire_at, seq, kind, issued_phase, version, epoch, payload=None):
        self.fire_at = fire_at
        self.seq = seq
        self.kind = kind
        self.issued_phase = issued_phase
        self.version = version
        self.epoch = epoch
        self.payload = payload or {}

    def __lt__(self, other):
        return (self.fire_at, self.seq) < (other.fire_at, other.seq)

    def __repr__(self):
        return f"ScheduledEvent({self.kind.name}, at={self.fire_at:.0f}ms, phase={self.issued_phase.name})"


class EventQueue:
    """
    Min-heap of ScheduledEvents ordered by fire time, then by scheduling order
    """
    def __init__(self):
        self._heap = []
        self._counter = itertools.count()

    def schedule(self, fire_at, kind, issued_phase, version, epoch, **payload):
        """Queue an event; returns it so callers can inspect it"""
        event = ScheduledEvent(fire_at, next(self._counter), kind, issued_phase, version, epoch, payload)
        heapq.heappush(self._heap, event)
        return event

    def pop_due(self, now):
        """Remove and yield every event with fire_at <= now, earliest first"""
        while self._heap and self._heap[0].fire_at <= now:
            yield heapq.heappop(self._heap)

    def cancel(self, kind):
        """Drop all pending events of a kind"""
        kept = [e for e in self._heap if e.kind != kind]
        if len(kept) != len(self._heap):
            heapq.heapify(kept)
            self._heap = kept

    def pending(self, kind=None):
        """Pending events (optionally of one kind), earliest first"""
        events = sorted(self._heap)
        if kind is None:
            return events
        return [e for e in events if e.kind == kind]

    def clear(self):
        self._heap.clear()

    def __len__(self):
        return len(self._heap)

    def __repr__(self):
        return f"EventQueue(pending={len(self._heap)})"
