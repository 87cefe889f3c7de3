"""Infra DB: pool manager, statement executor, driver error translation and classification."""

from .classifier import classify, report_error
from .errors import DriverPhase, translate_driver_error
from .executor import execute
from .pool import PoolManager, build_engine

__all__ = [
    "PoolManager",
    "build_engine",
    "execute",
    "classify",
    "report_error",
    "DriverPhase",
    "translate_driver_error",
]
