"""
Data I/O module for the load bootstrap framework.
"""
from .schema import ObservationSchema, create_default_schema
from .loader import (
    SIMULATION_COLUMNS,
    load_observations,
    load_and_prepare_observations,
    extract_historical_dates,
    simulations_to_frame,
    join_simulations,
    save_table,
    save_simulations,
    load_simulations
)

__all__ = [
    'ObservationSchema', 'create_default_schema',
    'SIMULATION_COLUMNS',
    'load_observations', 'load_and_prepare_observations',
    'extract_historical_dates', 'simulations_to_frame', 'join_simulations',
    'save_table', 'save_simulations', 'load_simulations'
]
