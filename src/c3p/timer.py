from typing import Any, Callable, Optional, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """
    Anything able to invoke a callback once after a delay.

    :class:`asyncio.AbstractEventLoop` and
    :class:`~c3p.simulator.SimulatedClock` both qualify.
    """

    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any
    ) -> TimerHandle: ...


class Timer:
    """
    A one-shot, re-armable timer on top of a :class:`Scheduler`.
    """

    def __init__(self, scheduler: Scheduler, function: Callable[[], None]) -> None:
        self._function = function
        self._handle: Optional[TimerHandle] = None
        self._scheduler = scheduler

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def is_running(self) -> bool:
        return self._handle is not None

    def schedule(self, delay: float) -> None:
        """
        Arm the timer to expire after `delay` seconds.

        A pending expiry is cancelled first.
        """
        self.cancel()
        self._handle = self._scheduler.call_later(delay, self._expire)

    def _expire(self) -> None:
        self._handle = None
        self._function()
