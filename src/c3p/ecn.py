class C3EcnRecorder:
    """
    Tallies marked and total bytes received on a tunnel during one interval.
    """

    def __init__(self) -> None:
        self._marked_bytes = 0
        self._total_bytes = 0

    def on_receive(self, size: int, marked: bool) -> None:
        if size < 0:
            raise ValueError("Packet size must not be negative")
        self._total_bytes += size
        if marked:
            self._marked_bytes += size

    def get_marked_bytes(self) -> int:
        return self._marked_bytes

    def get_marked_ratio(self) -> float:
        # no traffic means no congestion signal
        if not self._total_bytes:
            return 0.0
        return self._marked_bytes / self._total_bytes

    def get_total_bytes(self) -> int:
        return self._total_bytes

    def reset(self) -> None:
        self._marked_bytes = 0
        self._total_bytes = 0
