"""
Delay scheduling for wheel rounds.

The session controller only ever calls `call_later`. The server uses
SocketIOScheduler (background tasks on the SocketIO async mode); tests use
ManualScheduler and advance its clock by hand.
"""

import heapq
import itertools
import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class Scheduler(ABC):
    @abstractmethod
    def call_later(self, delay, callback, *args):
        """Run callback(*args) once, `delay` seconds from now."""
        ...


class ManualScheduler(Scheduler):
    """Deterministic scheduler driven by advance()/run_all(). Nothing runs on its own."""

    def __init__(self):
        self.now = 0.0
        self._queue = []
        self._counter = itertools.count()

    def call_later(self, delay, callback, *args):
        if delay < 0:
            raise ValueError("delay cannot be negative")
        heapq.heappush(self._queue, (self.now + delay, next(self._counter), callback, args))

    @property
    def pending(self):
        return len(self._queue)

    def next_due(self):
        return self._queue[0][0] if self._queue else None

    def advance(self, seconds):
        """Move the clock forward, running every callback that falls due (in due order)."""
        target = self.now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, callback, args = heapq.heappop(self._queue)
            self.now = due
            callback(*args)
            ran += 1
        self.now = target
        return ran

    def run_next(self):
        """
        Jump to the next due callback and run only that one, even when it
        schedules more work with zero delay. Returns False when nothing is queued.
        """
        if not self._queue:
            return False
        due, _, callback, args = heapq.heappop(self._queue)
        self.now = max(self.now, due)
        callback(*args)
        return True

    def run_all(self, limit=100):
        ran = 0
        while self._queue:
            if ran >= limit:
                raise RuntimeError(f"ManualScheduler still busy after {limit} callbacks")
            self.run_next()
            ran += 1
        return ran


class SocketIOScheduler(Scheduler):
    """Runs each callback in a SocketIO background task after socketio.sleep(delay)."""

    def __init__(self, socketio):
        self.socketio = socketio

    def call_later(self, delay, callback, *args):
        self.socketio.start_background_task(self._fire, delay, callback, args)

    def _fire(self, delay, callback, args):
        self.socketio.sleep(delay)
        try:
            callback(*args)
        except Exception as e:
            logger.error(f"Scheduled wheel callback {getattr(callback, '__name__', callback)} failed: {e}", exc_info=True)
