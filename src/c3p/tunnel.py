import ipaddress
import logging
from enum import IntEnum
from typing import Any, Callable, Dict, Hashable, Mapping, Optional, Tuple, Union

from .configuration import C3Configuration
from .congestion.aggregate import FlowAggregate
from .congestion.estimator import AlphaEstimator
from .congestion.rate import RateController
from .ecn import C3EcnRecorder
from .exceptions import C3Error, TunnelDisposedError
from .flow import C3Flow
from .logger import C3LoggerTrace
from .timer import Scheduler, Timer, TimerHandle
from .trace import TraceCallback, TracedValue
from .units import DataRate

logger = logging.getLogger("c3p")

Address = Union[str, ipaddress.IPv4Address]
ForwardTargetCallback = Callable[
    [Any, ipaddress.IPv4Address, ipaddress.IPv4Address, int, Any], None
]
FlowScheduler = Callable[["C3Tunnel"], None]


class C3Type(IntEnum):
    """
    The class of traffic carried by a tunnel.
    """

    LS = 0
    "Latency sensitive."

    DS = 1
    "Deadline sensitive."


class C3TunnelAdapter(logging.LoggerAdapter):
    def process(self, msg: str, kwargs: Any) -> Tuple[str, Any]:
        return "[%s] %s" % (self.extra["id"], msg), kwargs


class C3Tunnel:
    """
    A congestion controlled tunnel aggregating the flows of one tenant
    between a source and a destination.

    Every :attr:`~c3p.configuration.C3Configuration.interval` the tunnel
    refreshes its estimate of the marked fraction (alpha) from the ECN
    recorder, collects the weight requested by its flows and computes the
    rate budget for the next interval.

    :param tenant_id: The tenant owning the tunnel.
    :param tunnel_type: The :class:`C3Type` of the tunnel.
    :param src: The source IPv4 address.
    :param dst: The destination IPv4 address.
    :param scheduler: The :class:`~c3p.timer.Scheduler` driving updates, for
        instance an :mod:`asyncio` event loop or a
        :class:`~c3p.simulator.SimulatedClock`.
    :param configuration: The :class:`~c3p.configuration.C3Configuration`.
    :param ecn_recorder: The ECN recorder, a new
        :class:`~c3p.ecn.C3EcnRecorder` by default.
    :param flow_scheduler: An optional callable invoked with the tunnel after
        each rate update, to share the budget among flows.
    """

    def __init__(
        self,
        tenant_id: int,
        tunnel_type: C3Type,
        src: Address,
        dst: Address,
        *,
        scheduler: Scheduler,
        configuration: Optional[C3Configuration] = None,
        ecn_recorder: Optional[C3EcnRecorder] = None,
        flow_scheduler: Optional[FlowScheduler] = None,
    ) -> None:
        if configuration is None:
            configuration = C3Configuration()

        self._configuration = configuration
        self._dst = ipaddress.IPv4Address(dst)
        self._src = ipaddress.IPv4Address(src)
        self._tenant_id = tenant_id
        self._tunnel_type = C3Type(tunnel_type)

        self._disposed = False
        self._initialized = False
        self._sent_bytes = 0
        self._weight: TracedValue[float] = TracedValue(0.0)

        # collaborators
        self._ecn_recorder: Optional[C3EcnRecorder] = (
            ecn_recorder if ecn_recorder is not None else C3EcnRecorder()
        )
        self._flow_scheduler = flow_scheduler
        self._forward_target: Optional[ForwardTargetCallback] = None
        self._route: Any = None

        # congestion control
        self._aggregate = FlowAggregate()
        self._estimator = AlphaEstimator(
            gamma=configuration.gamma, initial_alpha=configuration.initial_alpha
        )
        self._rate_controller = RateController(
            rate=configuration.initial_rate,
            rate_thresh=configuration.rate_thresh,
            rate_min=configuration.rate_min,
            rate_max=configuration.rate_max,
            increment=configuration.rate_increment,
        )
        self._trace_sources: Dict[str, TracedValue] = {
            "alpha": self._estimator.alpha,
            "weight": self._weight,
            "weight_request": self._aggregate.weight_request,
        }

        # logging
        self._logger = C3TunnelAdapter(logger, {"id": self.tunnel_id})
        self._c3_logger: Optional[C3LoggerTrace] = None
        self._c3_logger_owner = configuration.c3_logger
        if self._c3_logger_owner is not None:
            self._c3_logger = self._c3_logger_owner.start_trace(
                tunnel_id=self.tunnel_id, clock=getattr(scheduler, "time", None)
            )

        # timers
        self._timer = Timer(scheduler, self.update)
        self._initialize_handle: Optional[TimerHandle] = scheduler.call_later(
            0, self.initialize
        )

    @property
    def alpha(self) -> float:
        return self._estimator.get()

    @property
    def configuration(self) -> C3Configuration:
        return self._configuration

    @property
    def dst(self) -> ipaddress.IPv4Address:
        return self._dst

    @property
    def ecn_recorder(self) -> Optional[C3EcnRecorder]:
        return self._ecn_recorder

    @property
    def flows(self) -> Mapping[Hashable, C3Flow]:
        return self._aggregate.flows

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def rate_thresh(self) -> DataRate:
        return self._rate_controller.rate_thresh

    @property
    def sent_bytes(self) -> int:
        return self._sent_bytes

    @property
    def src(self) -> ipaddress.IPv4Address:
        return self._src

    @property
    def tenant_id(self) -> int:
        return self._tenant_id

    @property
    def tunnel_id(self) -> str:
        return "%d-%s-%s-%s" % (
            self._tenant_id,
            self._tunnel_type.name,
            self._src,
            self._dst,
        )

    @property
    def tunnel_type(self) -> C3Type:
        return self._tunnel_type

    @property
    def weight(self) -> float:
        return self._weight.get()

    def add_flow(self, flow_id: Hashable, flow: C3Flow) -> None:
        """
        Attach a flow to the tunnel.
        """
        if self._disposed:
            raise TunnelDisposedError("Cannot add a flow to a disposed tunnel")
        self._aggregate.add(flow_id, flow)

    def remove_flow(self, flow_id: Hashable) -> C3Flow:
        """
        Detach a flow from the tunnel.

        The tunnel never removes flows on its own, finished flows are kept
        until their owner removes them.
        """
        return self._aggregate.remove(flow_id)

    def dispose(self) -> None:
        """
        Cancel the pending update and release all collaborators.

        Disposing a tunnel twice has no effect.
        """
        if self._disposed:
            return
        self._disposed = True

        self._timer.cancel()
        if self._initialize_handle is not None:
            self._initialize_handle.cancel()
            self._initialize_handle = None

        self._ecn_recorder = None
        self._forward_target = None
        self._route = None
        self._aggregate.clear()
        for source in self._trace_sources.values():
            source.disconnect_all()

        if self._c3_logger is not None:
            self._c3_logger_owner.end_trace(self._c3_logger)
            self._c3_logger = None

        self._logger.debug("Tunnel disposed")

    def forward(self, packet: Any, protocol: int) -> None:
        """
        Account for `packet` and hand it to the forward target.

        The rate budget is not enforced here, senders are expected to pace
        themselves using :meth:`get_rate`.
        """
        if self._disposed:
            raise TunnelDisposedError("Cannot forward on a disposed tunnel")
        if self._forward_target is None:
            raise C3Error("No forward target is set")

        self._sent_bytes += len(packet)
        self._forward_target(packet, self._src, self._dst, protocol, self._route)

    def get_rate(self) -> DataRate:
        return self._rate_controller.rate

    def get_weight_request(self) -> float:
        return self._aggregate.weight_request.get()

    def initialize(self) -> None:
        """
        Arm the update timer.

        This is scheduled as soon as the tunnel is created and only has an
        effect the first time.
        """
        self._initialize_handle = None
        if self._initialized or self._disposed:
            return
        self._initialized = True
        self._timer.schedule(self._configuration.interval)
        self._logger.debug(
            "Tunnel initialized with interval %.6f s", self._configuration.interval
        )

    def set_forward_target(self, callback: ForwardTargetCallback) -> None:
        self._forward_target = callback

    def set_rate_thresh(self, rate: Union[DataRate, str, int]) -> None:
        self._rate_controller.rate_thresh = DataRate(rate)

    def set_route(self, route: Any) -> None:
        self._route = route

    def set_weight(self, weight: float) -> None:
        self._weight.set(weight)

    def trace_connect(self, name: str, callback: TraceCallback) -> None:
        """
        Subscribe to changes of the `alpha`, `weight` or `weight_request`
        signals. The callback receives the old and the new value.
        """
        self._trace_sources[name].connect(callback)

    def trace_disconnect(self, name: str, callback: TraceCallback) -> None:
        self._trace_sources[name].disconnect(callback)

    def update(self) -> None:
        """
        Run one control interval.

        The order matters: the rate is computed from the bytes sent and the
        ECN counters of the interval which just ended, before they are reset.
        """
        if self._disposed:
            self._logger.debug("Ignoring update on disposed tunnel")
            return

        self._update_info()
        self._update_rate()
        if self._flow_scheduler is not None:
            self._flow_scheduler(self)

        # clear statistics of the last interval
        self._ecn_recorder.reset()
        self._sent_bytes = 0

        self._timer.schedule(self._configuration.interval)

    def _update_info(self) -> None:
        self._estimator.refresh(self._ecn_recorder.get_marked_ratio())
        self._aggregate.refresh()

    def _update_rate(self) -> None:
        marked_bytes = self._ecn_recorder.get_marked_bytes()
        if marked_bytes:
            self._logger.debug("Congestion detected, decrease tunnel rate")
        elif self._rate_controller.is_slow_start():
            self._logger.debug("No congestion, slow start like increase")
        else:
            self._logger.debug("No congestion, congestion avoidance like increase")

        self._rate_controller.on_interval(
            alpha=self._estimator.get(),
            weight=self._weight.get(),
            sent_bytes=self._sent_bytes,
            marked_bytes=marked_bytes,
            interval=self._configuration.interval,
        )

        if self._c3_logger is not None:
            self._c3_logger.log_event(
                category="tunnel",
                event="rate_updated",
                data={
                    "alpha": self._estimator.get(),
                    "congestion": bool(marked_bytes),
                    "marked_bytes": marked_bytes,
                    "rate": self._c3_logger.encode_rate(self._rate_controller.rate),
                    "rate_thresh": self._c3_logger.encode_rate(
                        self._rate_controller.rate_thresh
                    ),
                    "sent_bytes": self._sent_bytes,
                    "weight": self._weight.get(),
                    "weight_request": self._aggregate.weight_request.get(),
                },
            )
