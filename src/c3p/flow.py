import abc


class C3Flow(abc.ABC):
    """
    Base class for flows carried by a tunnel.
    """

    @abc.abstractmethod
    def is_finished(self) -> bool: ...

    @abc.abstractmethod
    def update_info(self) -> None:
        """
        Refresh the flow's demand, called once per tunnel update.
        """

    @abc.abstractmethod
    def get_weight(self) -> float: ...


class C3BulkFlow(C3Flow):
    """
    A flow transferring a fixed number of bytes with a constant weight.
    """

    def __init__(self, size: int, weight: float = 1.0) -> None:
        if size < 0:
            raise ValueError("Flow size must not be negative")
        if weight < 0:
            raise ValueError("Flow weight must not be negative")
        self.remaining = size
        self.sent_bytes = 0
        self.size = size
        self._weight = weight

    def get_weight(self) -> float:
        return self._weight

    def is_finished(self) -> bool:
        return self.sent_bytes >= self.size

    def on_send(self, size: int) -> None:
        self.sent_bytes += size

    def update_info(self) -> None:
        self.remaining = max(self.size - self.sent_bytes, 0)
