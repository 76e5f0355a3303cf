from types import MappingProxyType
from typing import Dict, Hashable, Mapping

from ..flow import C3Flow
from ..trace import TracedValue


class FlowAggregate:
    """
    The flows carried by a tunnel and their combined weight request.
    """

    def __init__(self) -> None:
        self.weight_request = TracedValue(0.0)
        self._flows: Dict[Hashable, C3Flow] = {}

    @property
    def flows(self) -> Mapping[Hashable, C3Flow]:
        return MappingProxyType(self._flows)

    def add(self, flow_id: Hashable, flow: C3Flow) -> None:
        self._flows[flow_id] = flow

    def clear(self) -> None:
        self._flows.clear()

    def remove(self, flow_id: Hashable) -> C3Flow:
        return self._flows.pop(flow_id)

    def refresh(self) -> float:
        """
        Refresh every unfinished flow and sum their weights.

        Finished flows are skipped but stay in the table.
        """
        weight_request = 0.0
        for flow in self._flows.values():
            if not flow.is_finished():
                flow.update_info()
                weight_request += flow.get_weight()
        self.weight_request.set(weight_request)
        return weight_request
