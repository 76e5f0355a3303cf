from ..trace import TracedValue


class AlphaEstimator:
    """
    Estimate of the fraction of marked bytes on a tunnel.

    The estimate is an exponentially weighted moving average of the marked
    ratio reported for each interval, as in DCTCP.
    """

    def __init__(self, *, gamma: float, initial_alpha: float = 1.0) -> None:
        self.alpha = TracedValue(initial_alpha)
        self.gamma = gamma

    def get(self) -> float:
        return self.alpha.get()

    def refresh(self, marked_ratio: float) -> None:
        self.alpha.set((1 - self.gamma) * self.alpha.get() + self.gamma * marked_ratio)
