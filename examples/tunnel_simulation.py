import argparse
import logging
from typing import List

from c3p.configuration import C3Configuration
from c3p.flow import C3BulkFlow
from c3p.logger import C3FileLogger
from c3p.simulator import SimulatedClock
from c3p.tunnel import C3Tunnel, C3Type
from c3p.units import DataRate

logger = logging.getLogger("simulation")

PACKET_SIZE = 1500
PROTOCOL_UDP = 17


class Bottleneck:
    """
    A link which marks every packet offered above its capacity during an
    interval, and reports the marks back to the sending tunnel.
    """

    def __init__(self, capacity: DataRate, interval: float) -> None:
        self.budget = capacity.bit_rate * interval / 8
        self.offered = 0
        self.tunnels = {}

    def on_interval(self) -> None:
        self.offered = 0

    def transmit(self, packet, src, dst, protocol, route) -> None:
        self.offered += len(packet)
        tunnel = self.tunnels[(src, dst)]
        tunnel.ecn_recorder.on_receive(len(packet), marked=self.offered > self.budget)


def share_weights(tunnels: List[C3Tunnel]) -> None:
    total = sum(tunnel.get_weight_request() for tunnel in tunnels)
    for tunnel in tunnels:
        if total:
            tunnel.set_weight(tunnel.get_weight_request() / total)
        else:
            tunnel.set_weight(0.0)


def send_interval(tunnel: C3Tunnel) -> None:
    """
    Send as many packets as the tunnel's rate allows during one interval.
    """
    interval = tunnel.configuration.interval
    rate = tunnel.get_rate()
    sent = 0
    for flow in tunnel.flows.values():
        while (
            rate.calculate_bytes_tx_time(sent + PACKET_SIZE) <= interval
            and not flow.is_finished()
        ):
            flow.on_send(PACKET_SIZE)
            tunnel.forward(bytes(PACKET_SIZE), PROTOCOL_UDP)
            sent += PACKET_SIZE


def main(
    configuration: C3Configuration,
    capacity: DataRate,
    duration: float,
    flow_size: int,
    tunnel_count: int,
) -> None:
    clock = SimulatedClock()
    bottleneck = Bottleneck(capacity, configuration.interval)

    tunnels = []
    for i in range(tunnel_count):
        tunnel = C3Tunnel(
            i,
            C3Type.LS,
            "10.0.0.%d" % (i + 1),
            "10.0.1.%d" % (i + 1),
            scheduler=clock,
            configuration=configuration,
        )
        tunnel.set_forward_target(bottleneck.transmit)
        tunnel.add_flow(0, C3BulkFlow(size=flow_size, weight=1.0 + i))
        bottleneck.tunnels[(tunnel.src, tunnel.dst)] = tunnel
        tunnels.append(tunnel)

    def on_tick() -> None:
        bottleneck.on_interval()
        share_weights(tunnels)
        for tunnel in tunnels:
            send_interval(tunnel)
        clock.call_later(configuration.interval, on_tick)

    # send right after the tunnels have updated
    clock.call_later(configuration.interval / 2, on_tick)
    clock.run_until(duration)

    for tunnel in tunnels:
        logger.info(
            "%s rate=%s alpha=%.3f weight=%.3f",
            tunnel.tunnel_id,
            tunnel.get_rate(),
            tunnel.alpha,
            tunnel.weight,
        )
        tunnel.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="C3 tunnel simulation")
    parser.add_argument(
        "--capacity", type=str, default="1Gbps", help="bottleneck link capacity"
    )
    parser.add_argument(
        "--duration", type=float, default=0.05, help="simulated time in seconds"
    )
    parser.add_argument(
        "--flow-size", type=int, default=10**8, help="bytes per flow"
    )
    parser.add_argument(
        "--interval", type=str, default="100us", help="tunnel update interval"
    )
    parser.add_argument(
        "--tunnels", type=int, default=2, help="number of tunnels sharing the link"
    )
    parser.add_argument(
        "-q",
        "--c3-log",
        type=str,
        help="log tunnel events to QLOG files in the specified directory",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="increase logging verbosity"
    )

    args = parser.parse_args()

    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        level=logging.DEBUG if args.verbose else logging.INFO,
    )

    configuration = C3Configuration(interval=args.interval)
    if args.c3_log:
        configuration.c3_logger = C3FileLogger(args.c3_log)

    main(
        configuration=configuration,
        capacity=DataRate(args.capacity),
        duration=args.duration,
        flow_size=args.flow_size,
        tunnel_count=args.tunnels,
    )
