from unittest import TestCase

from c3p.congestion.aggregate import FlowAggregate
from c3p.flow import C3BulkFlow

from .utils import FakeFlow, FaultyFlow


class FlowAggregateTest(TestCase):
    def test_empty(self):
        aggregate = FlowAggregate()
        self.assertEqual(aggregate.refresh(), 0.0)
        self.assertEqual(aggregate.weight_request.get(), 0.0)

    def test_refresh(self):
        aggregate = FlowAggregate()
        active = FakeFlow(weight=0.25)
        other = FakeFlow(weight=0.5)
        finished = FakeFlow(weight=100.0, finished=True)
        aggregate.add(1, active)
        aggregate.add(2, other)
        aggregate.add(3, finished)

        self.assertEqual(aggregate.refresh(), 0.75)
        self.assertEqual(aggregate.weight_request.get(), 0.75)
        self.assertEqual(active.update_count, 1)
        self.assertEqual(other.update_count, 1)
        self.assertEqual(finished.update_count, 0)

        # finished flows are kept
        self.assertEqual(sorted(aggregate.flows), [1, 2, 3])

    def test_refresh_after_finish(self):
        aggregate = FlowAggregate()
        flow = C3BulkFlow(size=1000, weight=2.0)
        aggregate.add("a", flow)
        self.assertEqual(aggregate.refresh(), 2.0)

        flow.on_send(1000)
        self.assertEqual(aggregate.refresh(), 0.0)
        self.assertIn("a", aggregate.flows)

    def test_remove(self):
        aggregate = FlowAggregate()
        flow = FakeFlow(weight=1.0)
        aggregate.add(1, flow)
        self.assertIs(aggregate.remove(1), flow)
        self.assertEqual(aggregate.refresh(), 0.0)

        with self.assertRaises(KeyError):
            aggregate.remove(1)

    def test_flows_read_only(self):
        aggregate = FlowAggregate()
        with self.assertRaises(TypeError):
            aggregate.flows[1] = FakeFlow(weight=1.0)

    def test_fault_propagates(self):
        aggregate = FlowAggregate()
        aggregate.add(1, FaultyFlow(weight=1.0))
        with self.assertRaises(RuntimeError):
            aggregate.refresh()
