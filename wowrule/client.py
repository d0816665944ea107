import logging
from typing import List, Optional, Tuple

import numpy as np
from luminol.modules.time_series import TimeSeries
from redis.client import Redis

from .function import AnomalyFunction, AnomalyFunctionSpec, week_over_week_rule
from .models.pipeline import Pipeline
from .models.series import DataPoint, Interval

log = logging.getLogger(__name__)


class WowRuleClient:
    def __init__(
            self,
            redis_client: Redis,
            aggregation_type: Optional[str] = None,
            time_bucket: Optional[int] = None
    ):
        self.redis_client: Redis = redis_client
        self.aggregation_type = aggregation_type
        self.time_bucket = time_bucket
        self.check_time_series_module()

    def check_time_series_module(self):
        """
        Verifies that the RedisTimeSeries module is loaded on the Redis server.
        Raises an exception if the module is not available.
        """
        modules = self.redis_client.module_list()

        has_time_series = any(m.get('name') in ('timeseries', b'timeseries') for m in modules)

        if not has_time_series:
            raise ModuleNotFoundError(
                "RedisTimeSeries module is not loaded on the Redis server. "
                "Please load the module before using time series functionality."
            )

    def create_function(self, spec: AnomalyFunctionSpec) -> AnomalyFunction:
        """
        Builds and initializes a week-over-week rule from its spec.

        Args:
            spec: The anomaly function spec

        Returns:
            The initialized AnomalyFunction
        """
        function = week_over_week_rule()
        function.init(spec)
        return function

    def get_data_points(self, key: bytes | str | memoryview, interval: Interval) -> List[DataPoint]:
        """
        Fetch the data points of a Redis time series within an interval.

        Args:
            key: The Redis time series key
            interval: Time range to read; its end is exclusive

        Returns:
            List of DataPoint objects in chronological order
        """
        samples = self.redis_client.ts().range(
            key=key,
            from_time=interval.start,
            to_time=interval.end - 1,
            aggregation_type=self.aggregation_type,
            bucket_size_msec=self.time_bucket or 0
        )

        return [DataPoint(timestamp=int(timestamp), value=float(value)) for timestamp, value in samples]

    def get_time_series(self, key: bytes | str | memoryview, interval: Interval) -> TimeSeries:
        """
        Fetch a Redis time series within an interval as a Luminol TimeSeries keyed by seconds.
        """
        data_points = self.get_data_points(key, interval)
        return TimeSeries({point.timestamp / 1000: point.value for point in data_points})

    def get_series(
            self,
            function: AnomalyFunction,
            key: bytes | str | memoryview,
            window_start: int,
            window_end: int
    ) -> Tuple[TimeSeries, List[TimeSeries]]:
        """
        Fetch the current window and its seasonal baselines for an anomaly function,
        with the function's transformation chains applied.

        Args:
            function: An initialized anomaly function
            key: The Redis time series key
            window_start: Start of the current window in Unix milliseconds
            window_end: End of the current window in Unix milliseconds (exclusive)

        Returns:
            Tuple containing:
                - The transformed current series
                - The transformed baseline series, nearest first
        """
        pipeline = self._pipeline(function)

        current_interval, *baseline_intervals = pipeline.data_model.get_intervals(window_start, window_end)
        log.debug("Fetching %s for %s with %d baseline windows", key, current_interval, len(baseline_intervals))

        current = self._apply_chain(pipeline.current_transform_chain, self.get_time_series(key, current_interval))
        baselines = [
            self._apply_chain(pipeline.baseline_transform_chain, self.get_time_series(key, interval))
            for interval in baseline_intervals
        ]

        return current, baselines

    def predict(
            self,
            function: AnomalyFunction,
            key: bytes | str | memoryview,
            window_start: int,
            window_end: int
    ) -> Tuple[TimeSeries, np.ndarray]:
        """
        Fetch the current window together with the values the prediction model expects for it.

        Returns:
            Tuple containing:
                - The transformed current series
                - Expected values, one per position shared by all baselines
        """
        current, baselines = self.get_series(function, key, window_start, window_end)
        expected = self._pipeline(function).prediction_model.predict(baselines)
        return current, expected

    def detect(
            self,
            function: AnomalyFunction,
            key: bytes | str | memoryview,
            window_start: int,
            window_end: int
    ) -> Tuple[List[bool], float]:
        """
        Compare the current window against its expected values.

        Args:
            function: An initialized anomaly function
            key: The Redis time series key
            window_start: Start of the current window in Unix milliseconds
            window_end: End of the current window in Unix milliseconds (exclusive)

        Returns:
            Tuple containing:
                - One flag per compared position, True where the detection model fires
                - The merge model's weight of the window over its expected values
        """
        pipeline = self._pipeline(function)
        current, expected = self.predict(function, key, window_start, window_end)

        values = current.values[:len(expected)]
        flags = [
            bool(pipeline.detection_model.is_anomaly(value, baseline))
            for value, baseline in zip(values, expected)
        ]
        weight = pipeline.merge_model.weight(values, expected)

        log.debug("Detected %d of %d points in %s", sum(flags), len(flags), key)
        return flags, weight

    @staticmethod
    def _pipeline(function: AnomalyFunction) -> Pipeline:
        if not function.is_initialized:
            raise RuntimeError("Anomaly function must be initialized before fetching its series")
        return function.pipeline

    @staticmethod
    def _apply_chain(chain, time_series: TimeSeries) -> TimeSeries:
        for transformation in chain:
            time_series = transformation.transform(time_series)
        return time_series
