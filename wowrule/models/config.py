from dataclasses import dataclass
from enum import Enum

# Keys read from an anomaly function's properties
BASELINE = 'baseline-spec'
ENABLE_SMOOTHING = 'enable-smoothing'
SEASONAL_PERIOD = 'seasonal-period'
SEASONAL_SIZE = 'seasonal-size'
SEASONAL_UNIT = 'seasonal-unit'
MOVING_AVERAGE_WINDOW = 'moving-average-window'
CHANGE_THRESHOLD = 'change-threshold'

DAYS_PER_WEEK = 7


class TimeUnit(Enum):
    """Units a seasonal size can be expressed in, valued in milliseconds."""
    MINUTES = 60 * 1000
    HOURS = 60 * 60 * 1000
    DAYS = 24 * 60 * 60 * 1000

    @property
    def millis(self) -> int:
        return self.value


@dataclass(frozen=True)
class BaselineSpec:
    """Seasonal comparison parameters decoded from a baseline string."""
    # Number of prior periods averaged into the baseline
    period: int = 1

    # Distance between the current window and a baseline window
    size: int = DAYS_PER_WEEK
    unit: TimeUnit = TimeUnit.DAYS

    # True for "...Avg" baselines, where period carries the parsed count
    is_average: bool = False

    def to_properties(self) -> dict:
        return {
            SEASONAL_PERIOD: str(self.period),
            SEASONAL_SIZE: str(self.size),
            SEASONAL_UNIT: self.unit.name,
        }
