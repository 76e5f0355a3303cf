from typing import Any, Callable, Generic, List, TypeVar

T = TypeVar("T")

TraceCallback = Callable[[Any, Any], None]


class TracedValue(Generic[T]):
    """
    A value which notifies its subscribers whenever it changes.

    Callbacks are invoked with the old and the new value. Assigning a value
    equal to the current one does not notify anyone.
    """

    def __init__(self, value: T) -> None:
        self._value = value
        self._callbacks: List[TraceCallback] = []

    def connect(self, callback: TraceCallback) -> None:
        self._callbacks.append(callback)

    def disconnect(self, callback: TraceCallback) -> None:
        self._callbacks.remove(callback)

    def disconnect_all(self) -> None:
        self._callbacks.clear()

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        old = self._value
        self._value = value
        if old != value:
            for callback in list(self._callbacks):
                callback(old, value)
