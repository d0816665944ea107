import logging
from typing import MutableMapping

from .baseline import resolve_baseline
from .models.config import BASELINE, ENABLE_SMOOTHING
from .models.pipeline import Pipeline
from .stages import (
    MovingAverageSmoothing,
    SeasonalAveragePrediction,
    SeasonalDataModel,
    SimplePercentageMerge,
    SimpleThresholdDetection,
)

log = logging.getLogger(__name__)


def assemble_week_over_week(properties: MutableMapping[str, str]) -> Pipeline:
    """
    Builds the week-over-week rule pipeline from an anomaly function's properties.

    The seasonal keys of properties are overwritten from its baseline string before
    any stage is initialized, so every stage sees the resolved values. Errors raised
    by a stage's init propagate and no pipeline is returned.

    Args:
        properties: The function's properties; mutated in place

    Returns:
        Pipeline with seasonal data sourcing, optional smoothing on both series,
        seasonal average prediction, threshold detection and percentage merge
    """
    resolve_baseline(properties.get(BASELINE), properties)

    data_model = SeasonalDataModel()
    data_model.init(properties)

    current_chain = []
    baseline_chain = []
    if ENABLE_SMOOTHING in properties:
        # One instance for both chains so current and baseline are smoothed alike
        smoothing = MovingAverageSmoothing()
        smoothing.init(properties)
        current_chain.append(smoothing)
        baseline_chain.append(smoothing)

    prediction_model = SeasonalAveragePrediction()
    prediction_model.init(properties)

    detection_model = SimpleThresholdDetection()
    detection_model.init(properties)

    merge_model = SimplePercentageMerge()
    merge_model.init(properties)

    log.debug("Assembled week-over-week pipeline (smoothing=%s)", bool(current_chain))

    return Pipeline(
        data_model=data_model,
        prediction_model=prediction_model,
        detection_model=detection_model,
        merge_model=merge_model,
        current_transform_chain=tuple(current_chain),
        baseline_transform_chain=tuple(baseline_chain),
    )
