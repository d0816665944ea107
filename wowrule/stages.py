from typing import List, Mapping, Sequence

import numpy as np
from luminol.modules.time_series import TimeSeries

from .models.config import (
    CHANGE_THRESHOLD,
    MOVING_AVERAGE_WINDOW,
    SEASONAL_PERIOD,
    SEASONAL_SIZE,
    SEASONAL_UNIT,
    TimeUnit,
)
from .models.series import Interval

DEFAULT_MOVING_AVERAGE_WINDOW = 3
DEFAULT_CHANGE_THRESHOLD = 0.1


def _positive_int(properties: Mapping[str, str], key: str, default: int) -> int:
    raw = properties.get(key)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"Property {key} must be an integer, got {raw!r}") from None
    if value < 1:
        raise ValueError(f"Property {key} must be at least 1, got {value}")
    return value


class SeasonalDataModel:
    """Locates the current window and the seasonal baseline windows before it."""

    def __init__(self):
        self.seasonal_period = 1
        self.seasonal_size = 7
        self.seasonal_unit = TimeUnit.DAYS

    def init(self, properties: Mapping[str, str]) -> None:
        self.seasonal_period = _positive_int(properties, SEASONAL_PERIOD, 1)
        self.seasonal_size = _positive_int(properties, SEASONAL_SIZE, 7)

        unit = properties.get(SEASONAL_UNIT, TimeUnit.DAYS.name)
        try:
            self.seasonal_unit = TimeUnit[unit.upper()]
        except KeyError:
            raise ValueError(f"Property {SEASONAL_UNIT} has unknown unit {unit!r}") from None

    @property
    def offset_ms(self) -> int:
        return self.seasonal_size * self.seasonal_unit.millis

    def get_intervals(self, window_start: int, window_end: int) -> List[Interval]:
        """
        Returns the current interval followed by one interval per seasonal period,
        the i-th shifted back by i seasonal sizes.
        """
        current = Interval(start=window_start, end=window_end)
        return [current] + [current.shift(-i * self.offset_ms) for i in range(1, self.seasonal_period + 1)]


class MovingAverageSmoothing:
    """Trailing moving average; the first window-1 points are dropped."""

    def __init__(self):
        self.window_size = DEFAULT_MOVING_AVERAGE_WINDOW

    def init(self, properties: Mapping[str, str]) -> None:
        self.window_size = _positive_int(properties, MOVING_AVERAGE_WINDOW, DEFAULT_MOVING_AVERAGE_WINDOW)

    def transform(self, time_series: TimeSeries) -> TimeSeries:
        values = np.asarray(time_series.values, dtype=float)
        if len(values) < self.window_size:
            return TimeSeries({})

        smoothed = np.convolve(values, np.ones(self.window_size) / self.window_size, mode='valid')
        timestamps = time_series.timestamps[self.window_size - 1:]
        return TimeSeries(dict(zip(timestamps, smoothed.tolist())))


class SeasonalAveragePrediction:
    """Expected values are the position-wise mean of the baseline series."""

    def init(self, properties: Mapping[str, str]) -> None:
        pass

    def predict(self, baselines: Sequence[TimeSeries]) -> np.ndarray:
        if not baselines:
            return np.array([], dtype=float)
        length = min(len(b.values) for b in baselines)
        stacked = np.array([b.values[:length] for b in baselines], dtype=float)
        return stacked.mean(axis=0) if length else np.array([], dtype=float)


class SimpleThresholdDetection:
    """
    Flags a value whose relative change from the expected value reaches the
    change threshold. A positive threshold detects increases, a negative one
    detects drops.
    """

    def __init__(self):
        self.change_threshold = DEFAULT_CHANGE_THRESHOLD

    def init(self, properties: Mapping[str, str]) -> None:
        raw = properties.get(CHANGE_THRESHOLD)
        if raw is None:
            self.change_threshold = DEFAULT_CHANGE_THRESHOLD
            return
        try:
            threshold = float(raw)
        except ValueError:
            raise ValueError(f"Property {CHANGE_THRESHOLD} must be a number, got {raw!r}") from None
        if threshold == 0 or np.isnan(threshold):
            raise ValueError(f"Property {CHANGE_THRESHOLD} must be non-zero, got {raw!r}")
        self.change_threshold = threshold

    def is_anomaly(self, current: float, expected: float) -> bool:
        if expected == 0:
            return False
        change = (current - expected) / expected
        if self.change_threshold > 0:
            return change >= self.change_threshold
        return change <= self.change_threshold


class SimplePercentageMerge:
    """Weights a merged anomaly by the relative change of its mean over the baseline mean."""

    def init(self, properties: Mapping[str, str]) -> None:
        pass

    def weight(self, current: Sequence[float], baseline: Sequence[float]) -> float:
        if len(current) == 0 or len(baseline) == 0:
            return 0.0
        baseline_mean = float(np.mean(baseline))
        if baseline_mean == 0:
            return 0.0
        return (float(np.mean(current)) - baseline_mean) / baseline_mean
