"""
Double seasonal block bootstrap of historical dates.

Synthesizes plausible date sequences for a target window by splicing
together randomly sized blocks of consecutive historical days. Each block
sits near the same time of year as the point it fills (seasonality within
the year) and keeps the day-to-day correlation of the days it copies
(seasonality within the block). The sampled dates are then joined back onto
weather/load observations to obtain bootstrapped series.
"""
import numpy as np
import pandas as pd
from typing import Any, Iterable, List, Optional, Tuple, Union
from dataclasses import dataclass, field
from joblib import Parallel, delayed

from ..core.logging_utils import get_logger
from ..core.utils import RandomSource, spawn_generators, to_date_index, to_timestamp, window_length
from .exceptions import InvalidRangeError, SamplingExhaustedError

MAX_WINDOW_DAYS = 365
DEFAULT_MAX_RETRIES = 1000


class HistoricalDates:
    """
    Read-only, normalized view of the historical date set.

    Dates are stripped of time-of-day and timezone, deduplicated and sorted.
    """

    def __init__(self, dates: Iterable[Any]):
        index = to_date_index(dates)
        if len(index) == 0:
            raise ValueError("Historical dates must not be empty")

        self._index = index
        self._years = np.asarray(sorted(index.year.unique()), dtype=int)

    @property
    def index(self) -> pd.DatetimeIndex:
        return self._index

    @property
    def years(self) -> np.ndarray:
        return self._years.copy()

    @property
    def first(self) -> pd.Timestamp:
        return self._index[0]

    @property
    def last(self) -> pd.Timestamp:
        return self._index[-1]

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, value: Any) -> bool:
        return to_timestamp(value) in self._index

    def covers(self, block: pd.DatetimeIndex) -> bool:
        """True if every date of ``block`` is a historical date."""
        return bool(block.isin(self._index).all())

    def __repr__(self):
        return (f"HistoricalDates(n={len(self)}, "
                f"{self.first.date()} to {self.last.date()}, "
                f"years={self._years.tolist()})")


@dataclass
class Simulation:
    """One bootstrapped date sequence covering the target window."""
    sim_id: int
    target_dates: pd.DatetimeIndex
    sampled_dates: pd.DatetimeIndex
    block_lengths: List[int] = field(default_factory=list)

    def __post_init__(self):
        if len(self.target_dates) != len(self.sampled_dates):
            raise ValueError(
                f"Simulation {self.sim_id}: {len(self.target_dates)} target dates "
                f"but {len(self.sampled_dates)} sampled dates"
            )

    def __len__(self) -> int:
        return len(self.target_dates)

    @property
    def n_blocks(self) -> int:
        return len(self.block_lengths)

    @property
    def pairs(self) -> List[Tuple[pd.Timestamp, pd.Timestamp]]:
        """(target_date, sampled_date) pairs in target order."""
        return list(zip(self.target_dates, self.sampled_dates))

    def blocks(self) -> List[pd.DatetimeIndex]:
        """Sampled dates split into the blocks they were drawn as."""
        bounds = np.cumsum([0] + list(self.block_lengths))
        return [self.sampled_dates[a:b] for a, b in zip(bounds[:-1], bounds[1:])]

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame({
            'sim': self.sim_id,
            'target_date': self.target_dates,
            'date': self.sampled_dates
        })


def validate_window(start_date: Any, end_date: Any) -> Tuple[pd.Timestamp, pd.Timestamp]:
    """
    Check the target window and return it as normalized Timestamps.

    Raises:
        InvalidRangeError: start is not before end, or the window spans
            more than MAX_WINDOW_DAYS days
    """
    start = to_timestamp(start_date)
    end = to_timestamp(end_date)

    if start >= end:
        raise InvalidRangeError(f"start_date {start.date()} must be before end_date {end.date()}")

    n_days = window_length(start, end)
    if n_days > MAX_WINDOW_DAYS:
        raise InvalidRangeError(
            f"Target window {start.date()} to {end.date()} spans {n_days} days "
            f"(maximum {MAX_WINDOW_DAYS})"
        )

    return start, end


def _check_parameters(n_sims: int, avg_block_len: int, delta_loc: int, delta_len: int, max_retries: int):
    checks = [
        ('n_sims', n_sims, 1),
        ('avg_block_len', avg_block_len, 1),
        ('delta_loc', delta_loc, 0),
        ('delta_len', delta_len, 0),
        ('max_retries', max_retries, 1),
    ]
    for name, value, minimum in checks:
        if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
            raise ValueError(f"{name} must be an integer, got {value!r}")
        if value < minimum:
            raise ValueError(f"{name} must be >= {minimum}, got {value}")


def draw_block(
    history: HistoricalDates,
    loc_date: pd.Timestamp,
    avg_block_len: int,
    delta_loc: int,
    delta_len: int,
    rng: np.random.Generator,
    remaining: Optional[int] = None
) -> Optional[pd.DatetimeIndex]:
    """
    Make one attempt at drawing a block for the cursor ``loc_date``.

    A historical year is drawn uniformly, the cursor is jittered by up to
    ``delta_loc`` days and moved into that year, and a run of
    ``avg_block_len +/- delta_len`` consecutive days is taken from there.

    Args:
        history: Historical dates to sample from
        loc_date: Current cursor in the target window
        avg_block_len: Mean block length in days
        delta_loc: Maximum absolute jitter of the block location
        delta_len: Maximum absolute jitter of the block length
        rng: Random source for this simulation
        remaining: Days left in the target window; the block is cut to this
            length before it is checked against the history

    Returns:
        The block's dates, or None when the attempt lands on Feb 29 of a
        non-leap year, before the first or after the last historical date,
        or across a gap in the history.
    """
    year = int(rng.choice(history.years))
    offset = int(rng.integers(-delta_loc, delta_loc + 1))
    # Lengths below one day cannot advance the cursor
    block_len = max(1, avg_block_len + int(rng.integers(-delta_len, delta_len + 1)))

    block_loc = loc_date + pd.Timedelta(days=offset)
    try:
        block_start = block_loc.replace(year=year)
    except ValueError:
        return None

    if block_start < history.first:
        return None

    block = pd.date_range(block_start, periods=block_len, freq='D')
    if remaining is not None:
        block = block[:remaining]
    if block[-1] > history.last:
        return None
    if not history.covers(block):
        return None

    return block


def simulate_path(
    history: HistoricalDates,
    start_date: pd.Timestamp,
    end_date: pd.Timestamp,
    sim_id: int,
    avg_block_len: int,
    delta_loc: int,
    delta_len: int,
    rng: np.random.Generator,
    max_retries: int = DEFAULT_MAX_RETRIES
) -> Simulation:
    """
    Build one simulation by splicing blocks until the window is filled.

    Raises:
        SamplingExhaustedError: ``max_retries`` consecutive attempts were
            discarded for the same cursor position
    """
    logger = get_logger()
    start_date = to_timestamp(start_date)
    end_date = to_timestamp(end_date)

    blocks = []
    loc_date = start_date
    while loc_date <= end_date:
        # The last block is checked only over the days it actually fills
        remaining = window_length(loc_date, end_date)
        for attempt in range(1, max_retries + 1):
            block = draw_block(history, loc_date, avg_block_len, delta_loc, delta_len, rng,
                               remaining=remaining)
            if block is not None:
                break
        else:
            raise SamplingExhaustedError(sim_id, loc_date.date(), max_retries)

        if attempt > 1:
            logger.debug(f"Simulation {sim_id}: block at {loc_date.date()} accepted after {attempt} attempts")

        blocks.append(block)
        loc_date = loc_date + pd.Timedelta(days=len(block))

    sampled = blocks[0].append(blocks[1:])
    lengths = [len(b) for b in blocks]

    return Simulation(
        sim_id=sim_id,
        target_dates=pd.date_range(start_date, end_date, freq='D'),
        sampled_dates=pd.DatetimeIndex(sampled),
        block_lengths=lengths
    )


def bootstrap(
    dates: Union[HistoricalDates, Iterable[Any]],
    start_date: Any,
    end_date: Any,
    n_sims: int,
    avg_block_len: int,
    delta_loc: int,
    delta_len: int,
    rng: RandomSource = None,
    n_jobs: int = 1,
    max_retries: int = DEFAULT_MAX_RETRIES
) -> List[Simulation]:
    """
    Generate ``n_sims`` bootstrapped date sequences for a target window.

    Args:
        dates: Historical dates (any date-like values, or a HistoricalDates)
        start_date: First day of the target window
        end_date: Last day of the target window (inclusive)
        n_sims: Number of simulations
        avg_block_len: Mean block length in days
        delta_loc: Maximum absolute jitter of block locations in days
        delta_len: Maximum absolute jitter of block lengths in days
        rng: Seed, SeedSequence or Generator; one child stream is spawned
            per simulation
        n_jobs: Number of joblib workers (1 runs in-process)
        max_retries: Discarded attempts allowed per block

    Returns:
        Simulations with ids 1..n_sims, in id order

    Raises:
        InvalidRangeError: Invalid target window
        SamplingExhaustedError: History too short for the requested window
    """
    logger = get_logger()

    start, end = validate_window(start_date, end_date)
    _check_parameters(n_sims, avg_block_len, delta_loc, delta_len, max_retries)

    history = dates if isinstance(dates, HistoricalDates) else HistoricalDates(dates)
    generators = spawn_generators(rng, n_sims)

    logger.info(
        f"Bootstrapping {n_sims} simulations for {start.date()} to {end.date()} "
        f"from {len(history)} historical dates ({len(history.years)} years)"
    )

    tasks = (
        (history, start, end, sim_id, avg_block_len, delta_loc, delta_len, gen, max_retries)
        for sim_id, gen in enumerate(generators, start=1)
    )

    if n_jobs == 1:
        simulations = [simulate_path(*task) for task in tasks]
    else:
        simulations = Parallel(n_jobs=n_jobs)(delayed(simulate_path)(*task) for task in tasks)

    n_blocks = sum(sim.n_blocks for sim in simulations)
    logger.info(f"Generated {len(simulations)} simulations ({n_blocks} blocks)")

    return list(simulations)
