from dataclasses import dataclass, field
from typing import Any, Tuple


@dataclass(frozen=True)
class Pipeline:
    """Ordered stages of one anomaly function, fixed once assembled."""
    data_model: Any
    prediction_model: Any
    detection_model: Any
    merge_model: Any

    # Applied to the current and baseline series before prediction
    current_transform_chain: Tuple[Any, ...] = field(default_factory=tuple)
    baseline_transform_chain: Tuple[Any, ...] = field(default_factory=tuple)

    @property
    def is_smoothing_enabled(self) -> bool:
        return bool(self.current_transform_chain)
