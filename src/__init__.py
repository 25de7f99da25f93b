"""
Load Bootstrap Framework
========================

Double seasonal block bootstrap for energy-load forecasting competitions:
resamples historical date ranges into plausible date sequences for a
future window, preserving the time of year and local day-to-day
correlation, then maps them back onto weather/load observations.

Modules:
    core: Configuration, logging and utilities
    bootstrap: Block bootstrap sampler
    data_io: Observation loading, simulation I/O and joins
    quality: Historical date coverage audit
    evaluation: Bootstrap diagnostics
    reporting: Visualization and plotting
"""

__version__ = "1.0.0"
__author__ = "Load Forecasting Team"

from . import core
from . import bootstrap
from . import data_io
from . import quality
from . import evaluation
from . import reporting
