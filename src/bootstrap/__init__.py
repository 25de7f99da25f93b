"""
Block bootstrap module for the load bootstrap framework.
"""
from .exceptions import BootstrapError, InvalidRangeError, SamplingExhaustedError
from .sampler import (
    MAX_WINDOW_DAYS,
    DEFAULT_MAX_RETRIES,
    HistoricalDates,
    Simulation,
    validate_window,
    draw_block,
    simulate_path,
    bootstrap
)

__all__ = [
    'BootstrapError', 'InvalidRangeError', 'SamplingExhaustedError',
    'MAX_WINDOW_DAYS', 'DEFAULT_MAX_RETRIES',
    'HistoricalDates', 'Simulation',
    'validate_window', 'draw_block', 'simulate_path', 'bootstrap'
]
