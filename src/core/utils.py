"""
General utilities for the load bootstrap framework.
"""
import numpy as np
import pandas as pd
import json
from pathlib import Path
from typing import Any, List, Union

RandomSource = Union[None, int, np.random.SeedSequence, np.random.Generator]


def spawn_generators(rng: RandomSource, n: int) -> List[np.random.Generator]:
    """
    Derive ``n`` independent generators from one random source.

    Every child gets its own stream, so a simulation reproduces
    identically whether it runs first, last, or in another process.

    Args:
        rng: None (fresh entropy), an integer seed, a SeedSequence or a Generator
        n: Number of generators to spawn

    Returns:
        List of numpy Generators
    """
    if isinstance(rng, np.random.Generator):
        return rng.spawn(n)
    if isinstance(rng, np.random.SeedSequence):
        seed_seq = rng
    else:
        seed_seq = np.random.SeedSequence(rng)
    return [np.random.default_rng(child) for child in seed_seq.spawn(n)]


def to_timestamp(value: Any) -> pd.Timestamp:
    """Coerce a date-like value to a midnight-normalized Timestamp."""
    ts = pd.Timestamp(value)
    if ts.tzinfo is not None:
        ts = ts.tz_localize(None)
    return ts.normalize()


def to_date_index(dates: Any) -> pd.DatetimeIndex:
    """
    Coerce date-like values to distinct, sorted, midnight-normalized dates.

    Accepts strings, ``datetime.date``/``datetime`` objects, Timestamps or
    datetime64 values in any iterable. Missing values are dropped.
    """
    index = pd.DatetimeIndex([pd.Timestamp(d) for d in dates]).dropna()
    if index.tz is not None:
        index = index.tz_localize(None)
    return index.normalize().unique().sort_values()


def window_length(start_date: Any, end_date: Any) -> int:
    """Number of days in the inclusive window [start_date, end_date]."""
    return (to_timestamp(end_date) - to_timestamp(start_date)).days + 1


class NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy and pandas types."""

    def default(self, obj):
        if isinstance(obj, np.integer):
            return int(obj)
        elif isinstance(obj, np.floating):
            return float(obj)
        elif isinstance(obj, np.ndarray):
            return obj.tolist()
        elif isinstance(obj, pd.DataFrame):
            return obj.to_dict(orient='records')
        elif isinstance(obj, pd.Series):
            return {str(k): v for k, v in obj.items()}
        elif isinstance(obj, pd.Timestamp):
            return obj.isoformat()
        elif isinstance(obj, (set, frozenset)):
            return sorted(obj)
        return super().default(obj)


def save_json_numpy(data: Any, path: Union[str, Path], indent: int = 2):
    """Save data to JSON file with numpy support."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=indent, cls=NumpyEncoder)
