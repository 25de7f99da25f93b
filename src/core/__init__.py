"""
Core module for the load bootstrap framework.
"""
from .config import (
    Config,
    DataConfig,
    BootstrapConfig,
    OutputConfig,
    create_run_directories,
    get_default_config,
    get_latest_run_id
)
from .logging_utils import setup_logging, get_logger, log_parameters, LogContext
from .utils import (
    RandomSource,
    save_json_numpy,
    spawn_generators,
    to_timestamp,
    to_date_index,
    window_length
)

__all__ = [
    'Config', 'DataConfig', 'BootstrapConfig', 'OutputConfig',
    'create_run_directories', 'get_default_config', 'get_latest_run_id',
    'setup_logging', 'get_logger', 'log_parameters', 'LogContext',
    'RandomSource', 'save_json_numpy',
    'spawn_generators', 'to_timestamp', 'to_date_index', 'window_length'
]
