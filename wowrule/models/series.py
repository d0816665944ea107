from dataclasses import dataclass


@dataclass
class DataPoint:
    """Class representing a time series data point."""
    timestamp: int  # Unix timestamp in milliseconds
    value: float


@dataclass(frozen=True)
class Interval:
    """Half-open time range [start, end) in Unix milliseconds."""
    start: int
    end: int

    def shift(self, offset_ms: int) -> 'Interval':
        return Interval(start=self.start + offset_ms, end=self.end + offset_ms)

    @property
    def duration_ms(self) -> int:
        return self.end - self.start
