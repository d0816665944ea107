import logging
from typing import MutableMapping, Optional

from .models.config import BaselineSpec, DAYS_PER_WEEK

log = logging.getLogger(__name__)

AVERAGE_SUFFIX = 'Avg'


def parse_wow_string(wow_string: Optional[str]) -> int:
    """
    Returns the first integer of a string; returns 1 if no integer could be found.

    Examples:
        "w/w" -> 1
        "Wo4W" -> 4
        "W/343wABCD" -> 343
        "2abc" -> 2
        "A Random string 34 and it is 54 a long one" -> 34

    Args:
        wow_string: Any string, usually a week-over-week baseline such as "Wo2W"

    Returns:
        The value of the first run of decimal digits in the string, or 1 when that
        run is all zeros or too long to convert
    """
    if not wow_string or wow_string.isspace():
        return 1

    head = next((idx for idx, char in enumerate(wow_string) if '0' <= char <= '9'), None)
    if head is None:
        return 1

    tail = head + 1
    while tail < len(wow_string) and '0' <= wow_string[tail] <= '9':
        tail += 1

    try:
        value = int(wow_string[head:tail])
    except ValueError:
        # Digit run past the interpreter's int conversion limit
        return 1

    return value if value > 0 else 1


def parse_baseline(baseline: Optional[str]) -> BaselineSpec:
    """
    Decodes a human readable baseline string into seasonal parameters.

    The string should look like [wW][/o][0-9]*[wW]. For example, "Wo2W" compares the
    current week with the week two weeks prior. If the string ends with "Avg", the
    number becomes a count of weeks to average instead: "W/4wAvg" compares the
    current week with the average of the past 4 weeks.

    Args:
        baseline: The baseline string; blank or None gives plain week-over-week

    Returns:
        BaselineSpec where at most one of period and size differs from its default
    """
    if not baseline or baseline.isspace():
        return BaselineSpec()

    count = parse_wow_string(baseline)
    if baseline.endswith(AVERAGE_SUFFIX):
        return BaselineSpec(period=count, is_average=True)
    return BaselineSpec(size=count * DAYS_PER_WEEK)


def resolve_baseline(baseline: Optional[str], properties: MutableMapping[str, str]) -> None:
    """
    Writes the seasonal period, size and unit for a baseline string into properties.

    Defaults are always written first, so existing seasonal keys are overwritten
    even when the baseline is blank.
    """
    properties.update(BaselineSpec().to_properties())

    spec = parse_baseline(baseline)
    try:
        overrides = spec.to_properties()
    except ValueError:
        log.debug("Baseline %r is too large to store, keeping defaults", baseline)
        return

    properties.update(overrides)
    log.debug("Resolved baseline %r to %s", baseline, spec)
