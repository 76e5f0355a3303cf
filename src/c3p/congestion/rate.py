from typing import Tuple

from ..units import DataRate

K_RATE_INCREMENT = DataRate("10Mbps")


def compute_rate(
    *,
    alpha: float,
    weight: float,
    sent_bytes: int,
    interval: float,
    rate: DataRate,
    rate_thresh: DataRate,
    rate_min: DataRate,
    rate_max: DataRate,
    marked_bytes: int,
    increment: DataRate = K_RATE_INCREMENT,
) -> Tuple[DataRate, DataRate]:
    """
    Compute the tunnel rate for the next interval.

    Returns the new rate, clamped to [`rate_min`, `rate_max`], and the new
    rate threshold. On congestion the threshold retreats to the unclamped
    decreased rate.
    """
    # throughput achieved during the last interval
    prev_rate = sent_bytes * 8 / interval

    if marked_bytes:
        # multiplicative decrease
        candidate = DataRate((1 - alpha / 2) * prev_rate)
        rate_thresh = candidate
    elif rate < rate_thresh:
        # slow start like growth
        candidate = DataRate((1 + weight) * prev_rate)
    else:
        # congestion avoidance like growth
        candidate = DataRate(prev_rate + weight * increment.bit_rate)

    return max(min(candidate, rate_max), rate_min), rate_thresh


class RateController:
    """
    AIMD rate controller gated by a slow start like threshold.
    """

    def __init__(
        self,
        *,
        rate: DataRate,
        rate_thresh: DataRate,
        rate_min: DataRate,
        rate_max: DataRate,
        increment: DataRate = K_RATE_INCREMENT,
    ) -> None:
        self.increment = increment
        self.rate = rate
        self.rate_max = rate_max
        self.rate_min = rate_min
        self.rate_thresh = rate_thresh

    def is_slow_start(self) -> bool:
        return self.rate < self.rate_thresh

    def on_interval(
        self,
        *,
        alpha: float,
        weight: float,
        sent_bytes: int,
        marked_bytes: int,
        interval: float,
    ) -> DataRate:
        self.rate, self.rate_thresh = compute_rate(
            alpha=alpha,
            weight=weight,
            sent_bytes=sent_bytes,
            interval=interval,
            rate=self.rate,
            rate_thresh=self.rate_thresh,
            rate_min=self.rate_min,
            rate_max=self.rate_max,
            marked_bytes=marked_bytes,
            increment=self.increment,
        )
        return self.rate
