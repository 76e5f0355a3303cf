import math
import re
from functools import total_ordering
from typing import Union

RATE_PREFIXES = {
    "": 1,
    "k": 1000,
    "K": 1000,
    "M": 1000**2,
    "G": 1000**3,
    "Ki": 1024,
    "Mi": 1024**2,
    "Gi": 1024**3,
}
RATE_UNITS = {"bps": 1, "b/s": 1, "Bps": 8, "B/s": 8}

# (multiplier, divisor) per unit, sub-second units divide
TIME_UNITS = {
    "": (1.0, 1.0),
    "s": (1.0, 1.0),
    "ms": (1.0, 1e3),
    "us": (1.0, 1e6),
    "ns": (1.0, 1e9),
    "min": (60.0, 1.0),
    "h": (3600.0, 1.0),
}

_QUANTITY_RE = re.compile(r"^\s*([0-9]*\.?[0-9]+(?:[eE][-+]?[0-9]+)?)\s*(\S*)\s*$")


def _split_quantity(value: str):
    m = _QUANTITY_RE.match(value)
    if m is None:
        raise ValueError("Invalid quantity %r" % value)
    return float(m.group(1)), m.group(2)


def parse_data_rate(value: str) -> int:
    """
    Parse a string such as ``"10Mbps"`` or ``"1.5GiB/s"`` into bits per second.
    """
    number, unit = _split_quantity(value)
    for suffix, multiplier in RATE_UNITS.items():
        if unit.endswith(suffix):
            prefix = unit[: -len(suffix)]
            if prefix in RATE_PREFIXES:
                return int(number * RATE_PREFIXES[prefix] * multiplier)
    raise ValueError("Invalid data rate unit in %r" % value)


def parse_time(value: Union[str, float, int]) -> float:
    """
    Parse a duration such as ``"100us"`` into seconds.

    Numbers are taken to be seconds already.
    """
    if isinstance(value, (int, float)):
        return float(value)
    number, unit = _split_quantity(value)
    try:
        multiplier, divisor = TIME_UNITS[unit]
        return number * multiplier / divisor
    except KeyError:
        raise ValueError("Invalid time unit in %r" % value)


@total_ordering
class DataRate:
    """
    A data rate, stored as an integral number of bits per second.

    Floats are truncated toward zero and strings are parsed with
    :func:`parse_data_rate`.
    """

    __slots__ = ("_bit_rate",)

    def __init__(self, value: Union["DataRate", str, int, float] = 0) -> None:
        if isinstance(value, DataRate):
            bit_rate = value.bit_rate
        elif isinstance(value, str):
            bit_rate = parse_data_rate(value)
        else:
            bit_rate = int(value)
        object.__setattr__(self, "_bit_rate", bit_rate)

    def __setattr__(self, name, value):
        raise AttributeError("DataRate is immutable")

    @property
    def bit_rate(self) -> int:
        return self._bit_rate

    def calculate_bytes_tx_time(self, size: int) -> float:
        """
        Return the time in seconds needed to transmit `size` bytes.

        A zero rate never transmits anything.
        """
        if self._bit_rate <= 0:
            return math.inf
        return size * 8 / self._bit_rate

    def __eq__(self, other) -> bool:
        if not isinstance(other, DataRate):
            return NotImplemented
        return self._bit_rate == other._bit_rate

    def __lt__(self, other) -> bool:
        if not isinstance(other, DataRate):
            return NotImplemented
        return self._bit_rate < other._bit_rate

    def __hash__(self) -> int:
        return hash(self._bit_rate)

    def __repr__(self) -> str:
        return "DataRate(%d)" % self._bit_rate

    def __str__(self) -> str:
        return "%dbps" % self._bit_rate
