"""
Evaluation module for the load bootstrap framework.
"""
from .metrics import (
    BootstrapSummary,
    sampled_year_frequencies,
    year_uniformity_test,
    block_lengths,
    day_of_month_histogram,
    check_simulation_alignment,
    summarize_bootstrap
)

__all__ = [
    'BootstrapSummary',
    'sampled_year_frequencies', 'year_uniformity_test',
    'block_lengths', 'day_of_month_histogram',
    'check_simulation_alignment', 'summarize_bootstrap'
]
