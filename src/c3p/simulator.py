import heapq
import itertools
from typing import Any, Callable, List, Optional, Tuple


class SimulatedTimerHandle:
    """
    A callback scheduled on a :class:`SimulatedClock`.
    """

    __slots__ = ("_args", "_callback", "_cancelled", "when")

    def __init__(self, when: float, callback: Callable[..., Any], args: Tuple) -> None:
        self._args = args
        self._callback = callback
        self._cancelled = False
        self.when = when

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled

    def _run(self) -> None:
        self._callback(*self._args)


class SimulatedClock:
    """
    A deterministic discrete-event scheduler.

    It exposes the subset of the :mod:`asyncio` event loop API used by
    :class:`~c3p.timer.Timer`, but time only advances when events are run.
    Events due at the same time run in the order they were scheduled.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._counter = itertools.count()
        self._now = start
        self._queue: List[Tuple[float, int, SimulatedTimerHandle]] = []

    def time(self) -> float:
        return self._now

    def call_at(
        self, when: float, callback: Callable[..., Any], *args: Any
    ) -> SimulatedTimerHandle:
        if when < self._now:
            raise ValueError("Cannot schedule an event in the past")
        handle = SimulatedTimerHandle(when, callback, args)
        heapq.heappush(self._queue, (when, next(self._counter), handle))
        return handle

    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any
    ) -> SimulatedTimerHandle:
        if delay < 0:
            raise ValueError("Delay must not be negative")
        return self.call_at(self._now + delay, callback, *args)

    def call_soon(
        self, callback: Callable[..., Any], *args: Any
    ) -> SimulatedTimerHandle:
        return self.call_at(self._now, callback, *args)

    def next_event_time(self) -> Optional[float]:
        self._discard_cancelled()
        if self._queue:
            return self._queue[0][0]
        return None

    def step(self) -> bool:
        """
        Run the next pending event, returning `False` if there was none.
        """
        self._discard_cancelled()
        if not self._queue:
            return False
        when, _, handle = heapq.heappop(self._queue)
        self._now = when
        handle._run()
        return True

    def run(self, max_events: Optional[int] = None) -> int:
        """
        Run events until none are left or `max_events` have run.
        """
        count = 0
        while max_events is None or count < max_events:
            if not self.step():
                break
            count += 1
        return count

    def run_until(self, when: float) -> int:
        """
        Run all events due up to and including `when`, then advance to `when`.
        """
        count = 0
        while True:
            next_time = self.next_event_time()
            if next_time is None or next_time > when:
                break
            self.step()
            count += 1
        if when > self._now:
            self._now = when
        return count

    def _discard_cancelled(self) -> None:
        while self._queue and self._queue[0][2].cancelled():
            heapq.heappop(self._queue)
