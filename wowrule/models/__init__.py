from .config import BaselineSpec, TimeUnit
from .pipeline import Pipeline
from .series import DataPoint, Interval

__all__ = ['BaselineSpec', 'TimeUnit', 'Pipeline', 'DataPoint', 'Interval']
