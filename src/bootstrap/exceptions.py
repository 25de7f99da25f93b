"""
Exceptions raised by the block bootstrap sampler.
"""
from typing import Any, Optional


class BootstrapError(Exception):
    """Base exception for block bootstrap failures."""


class InvalidRangeError(BootstrapError, ValueError):
    """Target window is empty, reversed, or longer than a year."""


class SamplingExhaustedError(BootstrapError, RuntimeError):
    """
    No valid block could be drawn within the retry budget.

    Raised when the historical dates are too short or too sparse for the
    requested window, block length and location jitter.
    """

    def __init__(self, sim_id: Optional[int] = None, loc_date: Any = None, attempts: int = 0):
        self.sim_id = sim_id
        self.loc_date = loc_date
        self.attempts = attempts
        super().__init__(
            f"Simulation {sim_id}: no valid block at {loc_date} after {attempts} attempts; "
            f"historical dates do not cover the requested window"
        )

    def __reduce__(self):
        # Keep the structured fields when re-raised from a worker process
        return (self.__class__, (self.sim_id, self.loc_date, self.attempts))
