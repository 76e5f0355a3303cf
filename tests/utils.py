import asyncio
import functools
import logging
import os
from typing import Callable, Coroutine, ParamSpec

from c3p.flow import C3Flow

P = ParamSpec("P")


def asynctest(
    coro: Callable[P, Coroutine[None, None, None]],
) -> Callable[P, None]:
    @functools.wraps(coro)
    def wrap(*args, **kwargs):
        asyncio.run(coro(*args, **kwargs))

    return wrap


class FakeFlow(C3Flow):
    def __init__(self, weight: float, finished: bool = False) -> None:
        self.finished = finished
        self.update_count = 0
        self.weight = weight

    def get_weight(self) -> float:
        return self.weight

    def is_finished(self) -> bool:
        return self.finished

    def update_info(self) -> None:
        self.update_count += 1


class FaultyFlow(FakeFlow):
    def update_info(self) -> None:
        raise RuntimeError("flow fault")


class FakeEcnRecorder:
    def __init__(self, marked_ratio: float = 0.0, marked_bytes: int = 0) -> None:
        self.calls = []
        self.marked_bytes = marked_bytes
        self.marked_ratio = marked_ratio

    def get_marked_bytes(self) -> int:
        self.calls.append("get_marked_bytes")
        return self.marked_bytes

    def get_marked_ratio(self) -> float:
        self.calls.append("get_marked_ratio")
        return self.marked_ratio

    def reset(self) -> None:
        self.calls.append("reset")
        self.marked_bytes = 0
        self.marked_ratio = 0.0


if os.environ.get("C3_DEBUG"):
    logging.basicConfig(level=logging.DEBUG)
