import math
from dataclasses import dataclass, field
from typing import Optional, Union

from .exceptions import ConfigurationError
from .logger import C3Logger
from .units import DataRate, parse_time


@dataclass
class C3Configuration:
    """
    A tunnel configuration.

    Values are validated once, when the configuration is created.
    """

    gamma: float = 1.0 / 16
    """
    The weight given to new samples against the past in the estimation
    of alpha. Must satisfy ``0 < gamma < 1``.
    """

    interval: Union[float, str] = 0.0001
    """
    The interval in seconds between two tunnel updates.

    Strings such as ``"100us"`` are accepted.
    """

    rate_max: Union[DataRate, str] = field(
        default_factory=lambda: DataRate("1000Mbps")
    )
    """
    The maximum data rate of the tunnel.
    """

    rate_min: Union[DataRate, str] = field(default_factory=lambda: DataRate("1Mbps"))
    """
    The minimum data rate of the tunnel.
    """

    rate_thresh: Union[DataRate, str] = field(
        default_factory=lambda: DataRate("500Mbps")
    )
    """
    The rate threshold at which the tunnel stops slow start like growth and
    starts congestion avoidance like growth.
    """

    rate_increment: Union[DataRate, str] = field(
        default_factory=lambda: DataRate("10Mbps")
    )
    """
    The additive increment applied per update during congestion avoidance,
    scaled by the tunnel weight.
    """

    initial_alpha: float = 1.0
    """
    The initial estimate of the fraction of marked packets.
    """

    initial_rate: Optional[Union[DataRate, str]] = None
    """
    The initial data rate of the tunnel. Defaults to :attr:`rate_min`.
    """

    c3_logger: Optional[C3Logger] = None
    """
    The :class:`~c3p.logger.C3Logger` instance to log events to.
    """

    def __post_init__(self) -> None:
        try:
            self.interval = parse_time(self.interval)
            self.rate_max = DataRate(self.rate_max)
            self.rate_min = DataRate(self.rate_min)
            self.rate_thresh = DataRate(self.rate_thresh)
            self.rate_increment = DataRate(self.rate_increment)
            if self.initial_rate is None:
                self.initial_rate = self.rate_min
            else:
                self.initial_rate = DataRate(self.initial_rate)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

        if not 0.0 < self.gamma < 1.0:
            raise ConfigurationError("gamma must be in (0, 1), got %r" % self.gamma)
        if not 0.0 <= self.initial_alpha <= 1.0:
            raise ConfigurationError(
                "initial_alpha must be in [0, 1], got %r" % self.initial_alpha
            )
        if not (math.isfinite(self.interval) and self.interval > 0):
            raise ConfigurationError(
                "interval must be positive and finite, got %r" % self.interval
            )
        if self.rate_min.bit_rate < 0:
            raise ConfigurationError("rate_min must not be negative")
        if self.rate_increment.bit_rate < 0:
            raise ConfigurationError("rate_increment must not be negative")
        if not self.rate_min <= self.rate_thresh <= self.rate_max:
            raise ConfigurationError(
                "rates must satisfy rate_min <= rate_thresh <= rate_max, got %s, %s, %s"
                % (self.rate_min, self.rate_thresh, self.rate_max)
            )
        if not self.rate_min <= self.initial_rate <= self.rate_max:
            raise ConfigurationError(
                "initial_rate %s is outside [%s, %s]"
                % (self.initial_rate, self.rate_min, self.rate_max)
            )
