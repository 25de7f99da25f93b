"""
Tests for bootstrap figures.
"""
import matplotlib
matplotlib.use('Agg')

import pytest
import pandas as pd
import matplotlib.pyplot as plt

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.bootstrap import bootstrap
from src.data_io import join_simulations
from src.evaluation import summarize_bootstrap, block_lengths, sampled_year_frequencies
from src.reporting import (
    plot_year_frequencies,
    plot_block_length_distribution,
    plot_bootstrapped_series,
    create_all_plots
)


@pytest.fixture
def bootstrapped():
    """Simulations and their joined daily series."""
    dates = pd.date_range('2015-01-01', '2016-12-31', freq='D')
    observations = pd.DataFrame({'date': dates, 'load': range(len(dates))})
    sims = bootstrap(dates, '2018-05-01', '2018-05-20', n_sims=5,
                     avg_block_len=6, delta_loc=4, delta_len=2, rng=0)
    return sims, join_simulations(sims, observations)


class TestPlots:
    """Tests for individual figures."""

    def test_year_frequencies(self, bootstrapped, tmp_path):
        """Test the year frequency bar chart is saved."""
        sims, _ = bootstrapped
        path = tmp_path / 'years.png'

        fig = plot_year_frequencies(sampled_year_frequencies(sims, [2015, 2016]),
                                    output_path=path, dpi=50)

        assert isinstance(fig, plt.Figure)
        assert path.exists()
        plt.close(fig)

    def test_block_lengths(self, bootstrapped, tmp_path):
        """Test the block length histogram is saved."""
        sims, _ = bootstrapped
        path = tmp_path / 'blocks.png'

        fig = plot_block_length_distribution(block_lengths(sims), output_path=path, dpi=50)

        assert path.exists()
        plt.close(fig)

    def test_bootstrapped_series(self, bootstrapped):
        """Test the fan chart draws one path per simulation."""
        _, joined = bootstrapped

        fig = plot_bootstrapped_series(joined, 'load')

        # 5 paths + median
        assert len(fig.axes[0].get_lines()) == 6
        plt.close(fig)

    def test_bootstrapped_series_unknown_column(self, bootstrapped):
        """Test that an unknown column is rejected."""
        _, joined = bootstrapped
        with pytest.raises(ValueError):
            plot_bootstrapped_series(joined, 'temperature')

    def test_create_all_plots(self, bootstrapped, tmp_path):
        """Test that every figure is written."""
        sims, joined = bootstrapped
        summary = summarize_bootstrap(sims, years=[2015, 2016]).to_dict()

        saved = create_all_plots(summary, joined, block_lengths(sims), ['load'], tmp_path, dpi=50)

        assert set(saved) == {'year_frequencies', 'block_lengths', 'bootstrapped_load'}
        assert all(p.exists() for p in saved.values())


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
