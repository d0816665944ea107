import unittest
from unittest.mock import Mock

import numpy as np

from wowrule.client import WowRuleClient
from wowrule.function import AnomalyFunctionSpec, week_over_week_rule
from wowrule.models.series import DataPoint, Interval

DAY_MS = 24 * 60 * 60 * 1000
WEEK_MS = 7 * DAY_MS
WINDOW_START = 100 * WEEK_MS
HOUR_MS = 60 * 60 * 1000


class TestWowRuleClient(unittest.TestCase):
    """Test suite for WowRuleClient against a mocked Redis server."""

    def setUp(self):
        """Set up test fixtures before each test method."""
        self.redis_client = Mock()

        # Mock the module_list method to indicate RedisTimeSeries is available
        self.redis_client.module_list.return_value = [
            {"name": "timeseries", "ver": 10205}
        ]

        self.ts_mock = Mock()
        self.redis_client.ts.return_value = self.ts_mock

        # Each week back, the hourly series is 10 lower
        def fake_range(key, from_time, to_time, **kwargs):
            weeks_back = (WINDOW_START - from_time) // WEEK_MS
            return [
                [from_time + i * HOUR_MS, 100.0 - 10 * weeks_back + i]
                for i in range(4)
            ]

        self.ts_mock.range.side_effect = fake_range
        self.client = WowRuleClient(self.redis_client)

    def _function(self, properties):
        return self.client.create_function(
            AnomalyFunctionSpec(function_name='test_wow', metric='test', properties=properties)
        )

    def test_missing_time_series_module(self):
        self.redis_client.module_list.return_value = [{"name": "search"}]
        with self.assertRaises(ModuleNotFoundError):
            WowRuleClient(self.redis_client)

    def test_get_data_points(self):
        points = self.client.get_data_points('test:key', Interval(WINDOW_START, WINDOW_START + 4 * HOUR_MS))

        self.ts_mock.range.assert_called_once_with(
            key='test:key',
            from_time=WINDOW_START,
            to_time=WINDOW_START + 4 * HOUR_MS - 1,
            aggregation_type=None,
            bucket_size_msec=0
        )
        self.assertEqual(points[0], DataPoint(timestamp=WINDOW_START, value=100.0))
        self.assertEqual(len(points), 4)

    def test_get_series_week_over_two_weeks(self):
        function = self._function("baseline-spec=Wo2W")

        current, baselines = self.client.get_series(function, 'test:key', WINDOW_START, WINDOW_START + DAY_MS)

        self.assertEqual(self.ts_mock.range.call_count, 2)
        _, kwargs = self.ts_mock.range.call_args
        self.assertEqual(kwargs['from_time'], WINDOW_START - 2 * WEEK_MS)
        self.assertEqual(list(current.values), [100.0, 101.0, 102.0, 103.0])
        self.assertEqual(len(baselines), 1)
        self.assertEqual(list(baselines[0].values), [80.0, 81.0, 82.0, 83.0])

    def test_predict_average_with_smoothing(self):
        function = self._function("baseline-spec=W/4wAvg;enable-smoothing=true;moving-average-window=2")

        current, expected = self.client.predict(function, 'test:key', WINDOW_START, WINDOW_START + DAY_MS)

        self.assertEqual(self.ts_mock.range.call_count, 5)
        self.assertEqual(list(current.values), [100.5, 101.5, 102.5])
        # Baselines are 90, 80, 70, 60 based; their mean is 75 based
        np.testing.assert_allclose(expected, [75.5, 76.5, 77.5])

    def test_detect_flags_and_weight(self):
        function = self._function("baseline-spec=Wo2W;change-threshold=0.245")

        flags, weight = self.client.detect(function, 'test:key', WINDOW_START, WINDOW_START + DAY_MS)

        # Current is 100..103 against 80..83 two weeks back
        self.assertEqual(flags, [True, True, False, False])
        self.assertAlmostEqual(weight, 20.0 / 81.5)

    def test_detect_downward_threshold(self):
        function = self._function("baseline-spec=Wo2W;change-threshold=-0.1")

        flags, weight = self.client.detect(function, 'test:key', WINDOW_START, WINDOW_START + DAY_MS)

        self.assertEqual(flags, [False] * 4)
        self.assertGreater(weight, 0)

    def test_uninitialized_function(self):
        with self.assertRaises(RuntimeError):
            self.client.get_series(week_over_week_rule(), 'test:key', WINDOW_START, WINDOW_START + DAY_MS)

    def test_redis_errors_propagate(self):
        self.ts_mock.range.side_effect = Exception("Redis connection error")
        function = self._function("baseline-spec=Wo2W")

        with self.assertRaises(Exception) as context:
            self.client.get_series(function, 'test:key', WINDOW_START, WINDOW_START + DAY_MS)

        self.assertIn("Redis connection error", str(context.exception))


if __name__ == '__main__':
    unittest.main()
