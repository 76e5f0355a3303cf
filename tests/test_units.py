import math
from unittest import TestCase

from c3p.units import DataRate, parse_data_rate, parse_time


class DataRateTest(TestCase):
    def test_parse(self):
        self.assertEqual(parse_data_rate("1bps"), 1)
        self.assertEqual(parse_data_rate("10Mbps"), 10_000_000)
        self.assertEqual(parse_data_rate("10kbps"), 10_000)
        self.assertEqual(parse_data_rate("10Kb/s"), 10_000)
        self.assertEqual(parse_data_rate("1Gbps"), 1_000_000_000)
        self.assertEqual(parse_data_rate("1.5Gbps"), 1_500_000_000)
        self.assertEqual(parse_data_rate("1MBps"), 8_000_000)
        self.assertEqual(parse_data_rate("2KiB/s"), 2 * 1024 * 8)
        self.assertEqual(parse_data_rate("1Mibps"), 1024 * 1024)

    def test_parse_invalid(self):
        for value in ["", "10", "-1Mbps", "10Xbps", "Mbps", "10 furlongs"]:
            with self.assertRaises(ValueError):
                parse_data_rate(value)

    def test_construct(self):
        self.assertEqual(DataRate("1000Mbps").bit_rate, 1_000_000_000)
        self.assertEqual(DataRate(1234).bit_rate, 1234)
        self.assertEqual(DataRate(DataRate(42)).bit_rate, 42)

    def test_construct_float_truncates(self):
        self.assertEqual(DataRate(1.9).bit_rate, 1)
        self.assertEqual(DataRate(7_499_999_999.9).bit_rate, 7_499_999_999)

    def test_compare(self):
        self.assertEqual(DataRate("1Mbps"), DataRate(1_000_000))
        self.assertLess(DataRate("1Mbps"), DataRate("10Mbps"))
        self.assertGreaterEqual(DataRate("1Gbps"), DataRate("1000Mbps"))
        self.assertEqual(max(DataRate(1), DataRate(2)), DataRate(2))
        self.assertEqual(len({DataRate(5), DataRate(5)}), 1)
        self.assertNotEqual(DataRate(5), 5)

    def test_immutable(self):
        rate = DataRate(5)
        with self.assertRaises(AttributeError):
            rate.foo = 1

    def test_str(self):
        self.assertEqual(str(DataRate("10Mbps")), "10000000bps")
        self.assertEqual(repr(DataRate(3)), "DataRate(3)")

    def test_calculate_bytes_tx_time(self):
        self.assertEqual(DataRate("8Mbps").calculate_bytes_tx_time(1000), 0.001)

    def test_calculate_bytes_tx_time_zero_rate(self):
        self.assertEqual(DataRate(0).calculate_bytes_tx_time(1000), math.inf)
        self.assertEqual(DataRate(0).calculate_bytes_tx_time(0), math.inf)


class ParseTimeTest(TestCase):
    def test_parse(self):
        self.assertEqual(parse_time("100us"), 0.0001)
        self.assertEqual(parse_time("1ms"), 0.001)
        self.assertAlmostEqual(parse_time("2ms"), 0.002)
        self.assertAlmostEqual(parse_time("3s"), 3.0)
        self.assertAlmostEqual(parse_time("5ns"), 5e-9)
        self.assertAlmostEqual(parse_time("1min"), 60.0)
        self.assertAlmostEqual(parse_time("1h"), 3600.0)
        self.assertAlmostEqual(parse_time("0.5"), 0.5)

    def test_parse_number(self):
        self.assertEqual(parse_time(0.25), 0.25)
        self.assertEqual(parse_time(2), 2.0)

    def test_parse_invalid(self):
        for value in ["", "1 fortnight", "abc", "-1s"]:
            with self.assertRaises(ValueError):
                parse_time(value)
