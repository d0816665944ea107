from .baseline import parse_baseline, parse_wow_string, resolve_baseline
from .client import WowRuleClient
from .function import AnomalyFunction, AnomalyFunctionSpec, dump_properties, load_properties, week_over_week_rule
from .models import BaselineSpec, DataPoint, Interval, Pipeline, TimeUnit
from .pipeline import assemble_week_over_week

__all__ = [
    'parse_baseline',
    'parse_wow_string',
    'resolve_baseline',
    'assemble_week_over_week',
    'AnomalyFunction',
    'AnomalyFunctionSpec',
    'load_properties',
    'dump_properties',
    'week_over_week_rule',
    'WowRuleClient',
    'BaselineSpec',
    'DataPoint',
    'Interval',
    'Pipeline',
    'TimeUnit',
]
