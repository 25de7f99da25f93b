"""
Observation loading and simulation I/O for the load bootstrap framework.
"""
import pandas as pd
from pathlib import Path
from typing import Optional, Tuple, Dict, Any, List, Sequence

from ..core.config import DataConfig
from ..core.logging_utils import get_logger
from ..bootstrap.sampler import Simulation
from .schema import ObservationSchema, create_default_schema

SIMULATION_COLUMNS = ['sim', 'target_date', 'date']


def _has_parquet_support() -> bool:
    """Check if parquet support is available."""
    try:
        import pyarrow  # noqa: F401
        return True
    except ImportError:
        pass
    try:
        import fastparquet  # noqa: F401
        return True
    except ImportError:
        pass
    return False


def _read_table(path: Path) -> pd.DataFrame:
    if path.suffix == '.parquet':
        if not _has_parquet_support():
            raise ImportError(
                f"Cannot read {path}: parquet support not available. "
                "Install pyarrow: pip install pyarrow"
            )
        return pd.read_parquet(path)
    if path.suffix in ('.csv', '.txt'):
        return pd.read_csv(path)
    raise ValueError(f"Unsupported file type: {path.suffix}")


def load_observations(
    path: str,
    schema: Optional[ObservationSchema] = None
) -> pd.DataFrame:
    """
    Load a cleaned observation table (date, hour, zone, weather/load fields).

    Args:
        path: CSV or parquet file
        schema: Column mapping (default schema if None)

    Returns:
        DataFrame with canonical column names, dates normalized to midnight,
        sorted by date (then hour and zone when present)
    """
    logger = get_logger()
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Observation file not found: {path}")

    if schema is None:
        schema = create_default_schema()

    logger.info(f"Loading observations from: {path}")
    df = _read_table(path)

    df = df.rename(columns=schema.resolve_columns(list(df.columns)))
    if schema.date_column not in df.columns:
        raise ValueError(
            f"Date column not found. Expected one of: {schema.aliases.get('date', [])}"
        )

    timestamps = pd.to_datetime(df[schema.date_column])
    # Hourly tables may carry the hour inside a timestamp column
    if schema.hour_column not in df.columns and (timestamps.dt.hour.fillna(0) > 0).any():
        df[schema.hour_column] = timestamps.dt.hour
        logger.info(f"Derived '{schema.hour_column}' from timestamps in '{schema.date_column}'")
    df[schema.date_column] = timestamps.dt.normalize()

    sort_cols = [c for c in (schema.date_column, schema.hour_column, schema.zone_column) if c in df.columns]
    df = df.sort_values(sort_cols, kind='stable').reset_index(drop=True)

    logger.info(f"Loaded {len(df)} rows, {len(df.columns)} columns")
    logger.info(f"Date range: {df[schema.date_column].min().date()} to {df[schema.date_column].max().date()}")

    return df


def load_and_prepare_observations(config: DataConfig) -> Tuple[pd.DataFrame, Dict[str, Any]]:
    """
    Load observations as configured and describe them.

    Returns:
        Tuple of (observations, metadata dict)
    """
    logger = get_logger()

    schema = ObservationSchema(
        date_column=config.date_column,
        hour_column=config.hour_column,
        zone_column=config.zone_column
    )
    df = load_observations(config.input_path, schema)

    missing = [c for c in config.value_columns if c not in df.columns]
    if missing:
        raise ValueError(f"Value columns not found in observations: {missing}")

    dates = extract_historical_dates(df, config.date_column)
    metadata = {
        'n_rows': len(df),
        'n_columns': len(df.columns),
        'n_dates': len(dates),
        'date_range': {
            'start': str(dates.min().date()),
            'end': str(dates.max().date())
        },
        'columns': list(df.columns),
        'value_columns': list(config.value_columns)
    }
    if config.zone_column in df.columns:
        metadata['n_zones'] = int(df[config.zone_column].nunique())

    logger.info(f"Observations prepared: {metadata['n_rows']} rows over {metadata['n_dates']} dates")

    return df, metadata


def extract_historical_dates(df: pd.DataFrame, date_column: str = 'date') -> pd.DatetimeIndex:
    """Distinct calendar dates of an observation table, sorted."""
    if date_column not in df.columns:
        raise ValueError(f"Column '{date_column}' not in observations")
    dates = pd.DatetimeIndex(pd.to_datetime(df[date_column]).dropna())
    return dates.normalize().unique().sort_values().rename('date')


def simulations_to_frame(simulations: Sequence[Simulation]) -> pd.DataFrame:
    """Stack simulations into one long table with columns sim, target_date, date."""
    if len(simulations) == 0:
        return pd.DataFrame({
            'sim': pd.Series(dtype='int64'),
            'target_date': pd.Series(dtype='datetime64[ns]'),
            'date': pd.Series(dtype='datetime64[ns]')
        })
    return pd.concat([sim.to_dataframe() for sim in simulations], ignore_index=True)


def join_simulations(
    simulations: Sequence[Simulation],
    observations: pd.DataFrame,
    date_column: str = 'date',
    value_columns: Optional[List[str]] = None
) -> pd.DataFrame:
    """
    Attach the observations of each sampled date to its target date.

    Every observation row of a sampled day (all hours and zones) is copied
    onto the target day it fills, yielding bootstrapped weather/load series.

    Args:
        simulations: Output of ``bootstrap``
        observations: Observation table
        date_column: Date column of the observation table
        value_columns: Columns to carry over (all non-date columns if None)

    Returns:
        DataFrame with sim, target_date, date plus the observation columns
    """
    if date_column not in observations.columns:
        raise ValueError(f"Column '{date_column}' not in observations")

    if value_columns is None:
        value_columns = [c for c in observations.columns if c != date_column]
    else:
        missing = [c for c in value_columns if c not in observations.columns]
        if missing:
            raise ValueError(f"Value columns not found in observations: {missing}")

    obs = observations[[date_column] + [c for c in value_columns if c != date_column]].copy()
    obs = obs.rename(columns={date_column: 'date'})
    obs['date'] = pd.to_datetime(obs['date']).dt.normalize().astype('datetime64[ns]')

    sims = simulations_to_frame(simulations)
    sims['date'] = sims['date'].astype('datetime64[ns]')
    joined = sims.merge(obs, on='date', how='inner')

    # Row order inside a day follows the observation table
    return joined.sort_values(['sim', 'target_date'], kind='stable').reset_index(drop=True)


def save_table(
    df: pd.DataFrame,
    output_dir: Path,
    name: str
) -> Path:
    """
    Save a DataFrame to parquet (or CSV as fallback).

    Returns:
        Path to saved file
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    if _has_parquet_support():
        output_path = output_dir / f"{name}.parquet"
        df.to_parquet(output_path, index=False)
    else:
        output_path = output_dir / f"{name}.csv"
        df.to_csv(output_path, index=False)

    return output_path


def save_simulations(
    simulations: Sequence[Simulation],
    output_dir: Path,
    name: str = "simulations"
) -> Path:
    """Save simulations as a long table."""
    logger = get_logger()
    output_path = save_table(simulations_to_frame(simulations), output_dir, name)
    logger.info(f"Saved {len(simulations)} simulations to: {output_path}")
    return output_path


def load_simulations(path: str) -> pd.DataFrame:
    """Load a simulation table written by ``save_simulations``."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"No simulation file found at {path}")

    df = _read_table(path)
    missing = [c for c in SIMULATION_COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Not a simulation table, missing columns: {missing}")

    df['target_date'] = pd.to_datetime(df['target_date'])
    df['date'] = pd.to_datetime(df['date'])
    return df
