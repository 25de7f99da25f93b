"""
Plots for bootstrap diagnostics and bootstrapped series.
"""
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
import matplotlib.dates as mdates
from typing import Dict, Any, Optional, Sequence, Tuple
from pathlib import Path

plt.rcParams['font.size'] = 12
plt.rcParams['axes.labelsize'] = 13
plt.rcParams['axes.titlesize'] = 15
plt.rcParams['axes.titleweight'] = 'bold'
plt.rcParams['legend.fontsize'] = 11
plt.rcParams['axes.grid'] = True
plt.rcParams['grid.alpha'] = 0.3


def set_plot_style(style: str = 'seaborn-v0_8-whitegrid'):
    """Set matplotlib style, falling back to the default one."""
    if style in plt.style.available:
        plt.style.use(style)
    else:
        plt.style.use('default')


def _save(fig: plt.Figure, output_path: Optional[Path], dpi: int):
    if output_path:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, dpi=dpi, bbox_inches='tight', facecolor='white')


def plot_year_frequencies(
    frequencies: pd.Series,
    title: str = "Sampled Historical Years",
    output_path: Optional[Path] = None,
    figsize: Tuple[int, int] = (10, 6),
    dpi: int = 300
) -> plt.Figure:
    """
    Bar chart of sampled dates per historical year, with the uniform level.

    Args:
        frequencies: Counts indexed by year
        title: Plot title
        output_path: Path to save figure
        figsize: Figure size
        dpi: Resolution of the saved figure

    Returns:
        Matplotlib figure
    """
    fig, ax = plt.subplots(figsize=figsize)

    years = [str(y) for y in frequencies.index]
    values = frequencies.values
    bars = ax.bar(years, values, color='steelblue', alpha=0.8, edgecolor='black')

    if len(values) > 0:
        ax.axhline(y=values.mean(), color='red', linestyle='--', linewidth=1.5, label='Uniform')
        for bar, val in zip(bars, values):
            ax.text(bar.get_x() + bar.get_width() / 2, bar.get_height(),
                    f'{val:,}', ha='center', va='bottom', fontsize=10)
        ax.legend(loc='lower right')

    ax.set_xlabel('Historical Year')
    ax.set_ylabel('Sampled Days')
    ax.set_title(title)

    plt.tight_layout()
    _save(fig, output_path, dpi)

    return fig


def plot_block_length_distribution(
    lengths: Sequence[int],
    title: str = "Block Length Distribution",
    output_path: Optional[Path] = None,
    figsize: Tuple[int, int] = (10, 6),
    dpi: int = 300
) -> plt.Figure:
    """Histogram of block lengths (final truncated blocks included)."""
    fig, ax = plt.subplots(figsize=figsize)

    lengths = np.asarray(lengths, dtype=int)
    if len(lengths) > 0:
        bins = np.arange(lengths.min(), lengths.max() + 2) - 0.5
        ax.hist(lengths, bins=bins, color='darkorange', alpha=0.8, edgecolor='black')
        ax.axvline(x=lengths.mean(), color='black', linestyle='--', linewidth=1.5,
                   label=f'Mean = {lengths.mean():.1f}')
        ax.legend(loc='upper left')

    ax.set_xlabel('Block Length (days)')
    ax.set_ylabel('Blocks')
    ax.set_title(title)

    plt.tight_layout()
    _save(fig, output_path, dpi)

    return fig


def plot_bootstrapped_series(
    joined: pd.DataFrame,
    value_column: str,
    title: Optional[str] = None,
    output_path: Optional[Path] = None,
    figsize: Tuple[int, int] = (14, 7),
    dpi: int = 300,
    max_paths: int = 100
) -> plt.Figure:
    """
    Fan chart of a bootstrapped series over the target window.

    Values are averaged per (sim, target_date), so hourly or multi-zone
    observations collapse to one daily value per simulation.

    Args:
        joined: Output of ``join_simulations``
        value_column: Column to plot
        title: Plot title (defaults to the column name)
        output_path: Path to save figure
        figsize: Figure size
        dpi: Resolution of the saved figure
        max_paths: Maximum number of individual paths drawn

    Returns:
        Matplotlib figure
    """
    if value_column not in joined.columns:
        raise ValueError(f"Column '{value_column}' not in joined series")

    daily = joined.groupby(['target_date', 'sim'])[value_column].mean().unstack('sim')

    fig, ax = plt.subplots(figsize=figsize)

    paths = daily.iloc[:, :max_paths]
    ax.plot(paths.index, paths.values, color='gray', alpha=0.25, linewidth=0.8)

    lower = daily.quantile(0.05, axis=1)
    upper = daily.quantile(0.95, axis=1)
    ax.fill_between(daily.index, lower, upper, color='steelblue', alpha=0.2, label='5-95%')
    ax.plot(daily.index, daily.median(axis=1), color='navy', linewidth=2, label='Median')

    ax.set_xlabel('Date')
    ax.set_ylabel(value_column)
    ax.set_title(title or f"Bootstrapped {value_column} ({daily.shape[1]} simulations)")
    ax.legend(loc='upper left')
    ax.xaxis.set_major_formatter(mdates.DateFormatter('%Y-%m-%d'))
    fig.autofmt_xdate()

    plt.tight_layout()
    _save(fig, output_path, dpi)

    return fig


def create_all_plots(
    summary: Dict[str, Any],
    joined: Optional[pd.DataFrame],
    lengths: Sequence[int],
    value_columns: Sequence[str],
    output_dir: Path,
    figure_format: str = 'png',
    dpi: int = 300
) -> Dict[str, Path]:
    """
    Write every bootstrap figure to ``output_dir``.

    Returns:
        Mapping of figure name to saved path
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    saved = {}

    freqs = pd.Series(summary.get('year_frequencies', {}), dtype='int64').sort_index()
    path = output_dir / f'year_frequencies.{figure_format}'
    plt.close(plot_year_frequencies(freqs, output_path=path, dpi=dpi))
    saved['year_frequencies'] = path

    path = output_dir / f'block_lengths.{figure_format}'
    plt.close(plot_block_length_distribution(lengths, output_path=path, dpi=dpi))
    saved['block_lengths'] = path

    if joined is not None:
        for col in value_columns:
            path = output_dir / f'bootstrapped_{col}.{figure_format}'
            plt.close(plot_bootstrapped_series(joined, col, output_path=path, dpi=dpi))
            saved[f'bootstrapped_{col}'] = path

    return saved
