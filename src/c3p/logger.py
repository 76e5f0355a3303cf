import json
import os
import time
from collections import deque
from typing import Any, Callable, Deque, Dict, List, Optional

TRACE_FORMAT_VERSION = "0.3"


class C3LoggerTrace:
    """
    A tunnel event trace.

    Events are logged in a qlog-like JSON format, one trace per tunnel.
    """

    def __init__(
        self, *, tunnel_id: str, clock: Optional[Callable[[], float]] = None
    ) -> None:
        self._clock = clock or time.time
        self._events: Deque[Dict[str, Any]] = deque()
        self._tunnel_id = tunnel_id
        self._vantage_point = {"name": "c3p", "type": "tunnel"}

    @property
    def tunnel_id(self) -> str:
        return self._tunnel_id

    def encode_rate(self, rate) -> int:
        return rate.bit_rate

    def encode_time(self, seconds: float) -> float:
        """
        Convert a time to milliseconds.
        """
        return seconds * 1000

    def log_event(self, *, category: str, event: str, data: Dict) -> None:
        self._events.append(
            {
                "data": data,
                "name": category + ":" + event,
                "time": self.encode_time(self._clock()),
            }
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Return the trace as a dictionary which can be written as JSON.
        """
        return {
            "common_fields": {"tunnel_id": self._tunnel_id},
            "events": list(self._events),
            "vantage_point": self._vantage_point,
        }


class C3Logger:
    """
    A tunnel event logger which stores traces in memory.
    """

    def __init__(self) -> None:
        self._traces: List[C3LoggerTrace] = []

    def start_trace(
        self, tunnel_id: str, clock: Optional[Callable[[], float]] = None
    ) -> C3LoggerTrace:
        trace = C3LoggerTrace(tunnel_id=tunnel_id, clock=clock)
        self._traces.append(trace)
        return trace

    def end_trace(self, trace: C3LoggerTrace) -> None:
        assert trace in self._traces, "C3LoggerTrace does not belong to C3Logger"

    def to_dict(self) -> Dict[str, Any]:
        """
        Return the traces as a dictionary which can be written as JSON.
        """
        return {
            "qlog_format": "JSON",
            "qlog_version": TRACE_FORMAT_VERSION,
            "traces": [trace.to_dict() for trace in self._traces],
        }


class C3FileLogger(C3Logger):
    """
    A tunnel event logger which writes one trace per file.
    """

    def __init__(self, path: str) -> None:
        if not os.path.isdir(path):
            raise ValueError("Tunnel log output directory '%s' does not exist" % path)
        self.path = path
        super().__init__()

    def end_trace(self, trace: C3LoggerTrace) -> None:
        trace_dict = trace.to_dict()
        trace_path = os.path.join(
            self.path, trace_dict["common_fields"]["tunnel_id"] + ".qlog"
        )
        with open(trace_path, "w") as logger_fp:
            json.dump(
                {
                    "qlog_format": "JSON",
                    "qlog_version": TRACE_FORMAT_VERSION,
                    "traces": [trace_dict],
                },
                logger_fp,
            )
        self._traces.remove(trace)
