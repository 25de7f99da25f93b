"""
Reporting module for the load bootstrap framework.
"""
from .plots import (
    set_plot_style,
    plot_year_frequencies,
    plot_block_length_distribution,
    plot_bootstrapped_series,
    create_all_plots
)

__all__ = [
    'set_plot_style',
    'plot_year_frequencies',
    'plot_block_length_distribution',
    'plot_bootstrapped_series',
    'create_all_plots'
]
