"""
Diagnostics for bootstrapped date sequences.
"""
import numpy as np
import pandas as pd
from scipy import stats
from typing import Dict, Any, List, Optional, Sequence, Union
from dataclasses import dataclass, field

from ..core.logging_utils import get_logger
from ..bootstrap.sampler import Simulation


@dataclass
class BootstrapSummary:
    """Container for bootstrap diagnostics."""
    n_sims: int = 0
    n_days: int = 0
    n_blocks: int = 0
    mean_block_len: float = 0.0
    min_block_len: int = 0
    max_block_len: int = 0
    year_frequencies: Dict[int, int] = field(default_factory=dict)
    chi2_statistic: float = 0.0
    chi2_p_value: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'n_sims': self.n_sims,
            'n_days': self.n_days,
            'n_blocks': self.n_blocks,
            'mean_block_len': self.mean_block_len,
            'min_block_len': self.min_block_len,
            'max_block_len': self.max_block_len,
            'year_frequencies': self.year_frequencies,
            'chi2_statistic': self.chi2_statistic,
            'chi2_p_value': self.chi2_p_value
        }


def sampled_year_frequencies(
    simulations: Sequence[Simulation],
    years: Optional[Sequence[int]] = None
) -> pd.Series:
    """
    Count sampled dates per historical year.

    Args:
        simulations: Bootstrap output
        years: Years to report (zero-filled); years seen in the output if None

    Returns:
        Series indexed by year
    """
    sampled = [sim.sampled_dates.year for sim in simulations]
    all_years = np.concatenate(sampled) if sampled else np.array([], dtype=int)
    counts = pd.Series(all_years, dtype='int64').value_counts().sort_index()

    if years is not None:
        counts = counts.reindex(sorted(int(y) for y in years), fill_value=0)

    counts.index.name = 'year'
    counts.name = 'count'
    return counts.astype('int64')


def year_uniformity_test(frequencies: pd.Series) -> Dict[str, float]:
    """
    Chi-square goodness of fit of year frequencies against a uniform split.

    Returns:
        Dictionary with statistic, p_value and degrees of freedom
    """
    observed = np.asarray(frequencies, dtype=float)
    if len(observed) < 2 or observed.sum() == 0:
        return {'statistic': 0.0, 'p_value': 1.0, 'dof': 0}

    result = stats.chisquare(observed)
    return {
        'statistic': float(result.statistic),
        'p_value': float(result.pvalue),
        'dof': len(observed) - 1
    }


def block_lengths(simulations: Union[Simulation, Sequence[Simulation]]) -> np.ndarray:
    """Lengths of the blocks making up one or more simulations."""
    if isinstance(simulations, Simulation):
        simulations = [simulations]
    lengths = [length for sim in simulations for length in sim.block_lengths]
    return np.asarray(lengths, dtype=int)


def day_of_month_histogram(simulations: Sequence[Simulation]) -> pd.Series:
    """Counts of sampled day-of-month (1..31) across simulations."""
    days = [sim.sampled_dates.day for sim in simulations]
    all_days = np.concatenate(days) if days else np.array([], dtype=int)
    counts = pd.Series(all_days, dtype='int64').value_counts()
    counts = counts.reindex(range(1, 32), fill_value=0)
    counts.index.name = 'day'
    counts.name = 'count'
    return counts.astype('int64')


def check_simulation_alignment(simulations: Sequence[Simulation]) -> List[str]:
    """
    List alignment problems in bootstrap output.

    Every simulation must cover the same contiguous target window with one
    sampled date per target day.
    """
    problems = []
    if len(simulations) == 0:
        return problems

    reference = simulations[0].target_dates
    for sim in simulations:
        if len(sim.sampled_dates) != len(sim.target_dates):
            problems.append(f"Simulation {sim.sim_id}: length mismatch")
        if not sim.target_dates.equals(reference):
            problems.append(f"Simulation {sim.sim_id}: target dates differ from simulation {simulations[0].sim_id}")
        elif len(reference) > 1 and not (np.diff(reference.values) == np.timedelta64(1, 'D')).all():
            problems.append(f"Simulation {sim.sim_id}: target dates are not contiguous")
        if sum(sim.block_lengths) != len(sim):
            problems.append(f"Simulation {sim.sim_id}: block lengths do not add up")

    return problems


def summarize_bootstrap(
    simulations: Sequence[Simulation],
    years: Optional[Sequence[int]] = None
) -> BootstrapSummary:
    """
    Summarize bootstrap output for reporting.

    Args:
        simulations: Bootstrap output
        years: Historical years, so unsampled years count as zero

    Returns:
        BootstrapSummary
    """
    logger = get_logger()

    if len(simulations) == 0:
        return BootstrapSummary()

    lengths = block_lengths(simulations)
    freqs = sampled_year_frequencies(simulations, years)
    chi2 = year_uniformity_test(freqs)

    summary = BootstrapSummary(
        n_sims=len(simulations),
        n_days=len(simulations[0]),
        n_blocks=len(lengths),
        mean_block_len=float(lengths.mean()),
        min_block_len=int(lengths.min()),
        max_block_len=int(lengths.max()),
        year_frequencies={int(y): int(n) for y, n in freqs.items()},
        chi2_statistic=chi2['statistic'],
        chi2_p_value=chi2['p_value']
    )

    logger.info(
        f"Bootstrap summary: {summary.n_sims} sims x {summary.n_days} days, "
        f"{summary.n_blocks} blocks (mean length {summary.mean_block_len:.1f}), "
        f"year uniformity p={summary.chi2_p_value:.3f}"
    )

    return summary
