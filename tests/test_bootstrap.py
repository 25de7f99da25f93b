"""
Tests for the double seasonal block bootstrap.
"""
import pickle

import pytest
import numpy as np
import pandas as pd

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.bootstrap import (
    bootstrap, draw_block, simulate_path, validate_window,
    HistoricalDates, Simulation,
    BootstrapError, InvalidRangeError, SamplingExhaustedError
)


@pytest.fixture
def history():
    """Three full years of daily dates."""
    return pd.date_range(start='2015-01-01', end='2017-12-31', freq='D')


@pytest.fixture
def january_sims(history):
    """Fifty simulations of January 2018."""
    return bootstrap(
        history, '2018-01-01', '2018-01-31',
        n_sims=50, avg_block_len=14, delta_loc=10, delta_len=4, rng=42
    )


class TestOutputShape:
    """Tests for the structure of bootstrap output."""

    def test_simulation_count_and_ids(self, january_sims):
        """Test that one simulation per id 1..n_sims is returned."""
        assert len(january_sims) == 50
        assert [sim.sim_id for sim in january_sims] == list(range(1, 51))

    def test_each_simulation_covers_window(self, january_sims):
        """Test that every simulation has one pair per target day."""
        for sim in january_sims:
            assert len(sim) == 31
            assert len(sim.sampled_dates) == 31
            assert len(sim.pairs) == 31

    def test_target_dates_contiguous(self, january_sims):
        """Test that target dates are exactly the window, in order."""
        expected = pd.date_range('2018-01-01', '2018-01-31', freq='D')
        for sim in january_sims:
            np.testing.assert_array_equal(sim.target_dates.values, expected.values)
            assert sim.pairs[0][0] == pd.Timestamp('2018-01-01')
            assert sim.pairs[-1][0] == pd.Timestamp('2018-01-31')

    def test_sampled_dates_are_historical(self, january_sims, history):
        """Test that no sampled date is fabricated."""
        for sim in january_sims:
            assert sim.sampled_dates.isin(history).all()

    def test_blocks_are_contiguous(self, january_sims):
        """Test that every block is a run of consecutive days."""
        for sim in january_sims:
            assert sum(sim.block_lengths) == len(sim)
            for block in sim.blocks():
                assert len(block) >= 1
                diffs = np.diff(block.values)
                assert (diffs == np.timedelta64(1, 'D')).all()

    def test_block_lengths_within_bounds(self, january_sims):
        """Test that blocks respect avg_block_len +/- delta_len (last may be truncated)."""
        for sim in january_sims:
            for length in sim.block_lengths[:-1]:
                assert 10 <= length <= 18
            assert 1 <= sim.block_lengths[-1] <= 18

    def test_blocks_stay_near_season(self, january_sims):
        """Test that blocks start close to the cursor's day of year."""
        for sim in january_sims:
            first = sim.blocks()[0][0]
            # Cursor Jan 1 jittered by up to 10 days
            assert (first.month, first.day) <= (1, 11) or (first.month, first.day) >= (12, 22)

    def test_to_dataframe(self, january_sims):
        """Test conversion to a long table."""
        df = january_sims[0].to_dataframe()

        assert list(df.columns) == ['sim', 'target_date', 'date']
        assert len(df) == 31
        assert (df['sim'] == 1).all()


class TestWindowValidation:
    """Tests for target window checks."""

    def test_start_equals_end(self, history):
        """Test that an empty window is rejected."""
        with pytest.raises(InvalidRangeError):
            bootstrap(history, '2018-01-01', '2018-01-01', 1, 7, 0, 0)

    def test_start_after_end(self, history):
        """Test that a reversed window is rejected."""
        with pytest.raises(InvalidRangeError):
            bootstrap(history, '2018-02-01', '2018-01-01', 1, 7, 0, 0)

    def test_window_longer_than_year(self, history):
        """Test that a 366-day window is rejected."""
        with pytest.raises(InvalidRangeError):
            bootstrap(history, '2018-01-01', '2019-01-01', 1, 7, 0, 0)

    def test_full_year_window_accepted(self, history):
        """Test that a 365-day window is accepted."""
        sims = bootstrap(history, '2018-01-01', '2018-12-31', 2, 30, 5, 5, rng=0)
        assert all(len(sim) == 365 for sim in sims)

    def test_invalid_range_is_value_error(self):
        """Test the exception hierarchy."""
        assert issubclass(InvalidRangeError, ValueError)
        assert issubclass(InvalidRangeError, BootstrapError)
        assert issubclass(SamplingExhaustedError, BootstrapError)

    def test_validate_window_normalizes(self):
        """Test that times of day are dropped."""
        start, end = validate_window('2018-01-01 13:00', pd.Timestamp('2018-01-05 08:30'))
        assert start == pd.Timestamp('2018-01-01')
        assert end == pd.Timestamp('2018-01-05')


class TestParameterValidation:
    """Tests for numeric parameter checks."""

    @pytest.mark.parametrize('kwargs', [
        {'n_sims': 0},
        {'avg_block_len': 0},
        {'delta_loc': -1},
        {'delta_len': -1},
        {'max_retries': 0},
        {'n_sims': 2.5},
    ])
    def test_invalid_parameters(self, history, kwargs):
        """Test that out-of-range parameters raise ValueError."""
        params = dict(n_sims=1, avg_block_len=7, delta_loc=0, delta_len=0)
        params.update(kwargs)
        with pytest.raises(ValueError):
            bootstrap(history, '2018-01-01', '2018-01-31', **params)

    def test_empty_history(self):
        """Test that an empty date set is rejected."""
        with pytest.raises(ValueError):
            bootstrap([], '2018-01-01', '2018-01-31', 1, 7, 0, 0)


class TestDegenerateCase:
    """Tests for zero jitter on a single year of history."""

    @pytest.mark.parametrize('start,end', [
        ('2015-01-01', '2015-12-31'),
        ('2018-01-01', '2018-12-31'),
    ])
    @pytest.mark.parametrize('block_len', [7, 30, 73])
    def test_returns_original_dates(self, start, end, block_len):
        """Test that zero jitter reproduces the history in order."""
        year = pd.date_range('2015-01-01', '2015-12-31', freq='D')

        sims = bootstrap(year, start, end, n_sims=3, avg_block_len=block_len,
                         delta_loc=0, delta_len=0, rng=1, max_retries=50)

        n_full, rest = divmod(365, block_len)
        expected_lengths = [block_len] * n_full + ([rest] if rest else [])
        for sim in sims:
            np.testing.assert_array_equal(sim.sampled_dates.values, year.values)
            assert sim.block_lengths == expected_lengths

    def test_last_block_fits_end_of_history(self):
        """Test that a final block running past the history is accepted when cut to the window."""
        history = HistoricalDates(pd.date_range('2015-01-01', '2015-12-31', freq='D'))
        rng = np.random.default_rng(0)

        assert draw_block(history, pd.Timestamp('2015-12-30'), 7, 0, 0, rng) is None
        block = draw_block(history, pd.Timestamp('2015-12-30'), 7, 0, 0, rng, remaining=2)

        expected = pd.date_range('2015-12-30', '2015-12-31', freq='D')
        np.testing.assert_array_equal(block.values, expected.values)


class TestReproducibility:
    """Tests for seeded, independent random streams."""

    def _run(self, history, rng, n_jobs=1):
        return bootstrap(history, '2018-03-01', '2018-04-30', n_sims=6,
                         avg_block_len=10, delta_loc=7, delta_len=3,
                         rng=rng, n_jobs=n_jobs)

    def test_same_seed_same_output(self, history):
        """Test that an integer seed reproduces the output."""
        a = self._run(history, 123)
        b = self._run(history, 123)
        for sa, sb in zip(a, b):
            assert sa.sampled_dates.equals(sb.sampled_dates)
            assert sa.block_lengths == sb.block_lengths

    def test_generator_seed(self, history):
        """Test that identically seeded generators reproduce the output."""
        a = self._run(history, np.random.default_rng(7))
        b = self._run(history, np.random.default_rng(7))
        for sa, sb in zip(a, b):
            assert sa.sampled_dates.equals(sb.sampled_dates)

    def test_parallel_matches_sequential(self, history):
        """Test that worker count does not change results."""
        sequential = self._run(history, 99, n_jobs=1)
        parallel = self._run(history, 99, n_jobs=2)
        for ss, sp in zip(sequential, parallel):
            assert ss.sim_id == sp.sim_id
            assert ss.sampled_dates.equals(sp.sampled_dates)

    def test_simulations_differ(self, history):
        """Test that simulations use independent streams."""
        sims = self._run(history, 5)
        distinct = {tuple(sim.sampled_dates.asi8) for sim in sims}
        assert len(distinct) > 1


class TestSamplingExhausted:
    """Tests for the bounded retry budget."""

    def test_history_too_short(self):
        """Test that blocks longer than the history exhaust the retries."""
        short = pd.date_range('2015-01-01', '2015-01-10', freq='D')

        with pytest.raises(SamplingExhaustedError) as exc_info:
            bootstrap(short, '2018-01-01', '2018-01-31', n_sims=3,
                      avg_block_len=20, delta_loc=0, delta_len=0,
                      rng=0, max_retries=50)

        assert exc_info.value.sim_id == 1
        assert exc_info.value.attempts == 50

    def test_error_survives_pickling(self):
        """Test that structured fields survive a process boundary."""
        err = SamplingExhaustedError(4, pd.Timestamp('2018-01-15').date(), 1000)
        restored = pickle.loads(pickle.dumps(err))

        assert isinstance(restored, SamplingExhaustedError)
        assert restored.sim_id == 4
        assert restored.attempts == 1000
        assert str(restored) == str(err)


class TestDrawBlock:
    """Tests for single block attempts."""

    def test_feb_29_in_non_leap_year(self):
        """Test that Feb 29 moved into a non-leap year is discarded."""
        history = HistoricalDates(pd.date_range('2015-01-01', '2015-12-31', freq='D'))
        rng = np.random.default_rng(0)

        block = draw_block(history, pd.Timestamp('2020-02-29'), 5, 0, 0, rng)
        assert block is None

    def test_block_past_last_date(self):
        """Test that a block running past the history is discarded."""
        history = HistoricalDates(pd.date_range('2015-01-01', '2015-12-31', freq='D'))
        rng = np.random.default_rng(0)

        block = draw_block(history, pd.Timestamp('2018-12-30'), 5, 0, 0, rng)
        assert block is None

    def test_block_before_first_date(self):
        """Test that a block starting before the history is discarded."""
        history = HistoricalDates(pd.date_range('2015-06-01', '2015-12-31', freq='D'))
        rng = np.random.default_rng(0)

        block = draw_block(history, pd.Timestamp('2018-01-10'), 5, 0, 0, rng)
        assert block is None

    def test_block_across_gap(self):
        """Test that a block spanning missing days is discarded."""
        dates = pd.date_range('2015-01-01', '2015-12-31', freq='D')
        history = HistoricalDates(dates.drop(pd.Timestamp('2015-03-15')))
        rng = np.random.default_rng(0)

        assert draw_block(history, pd.Timestamp('2018-03-10'), 10, 0, 0, rng) is None
        assert draw_block(history, pd.Timestamp('2018-04-10'), 10, 0, 0, rng) is not None

    def test_valid_block(self):
        """Test that a valid attempt returns consecutive days in the drawn year."""
        history = HistoricalDates(pd.date_range('2015-01-01', '2015-12-31', freq='D'))
        rng = np.random.default_rng(0)

        block = draw_block(history, pd.Timestamp('2018-05-01'), 7, 0, 0, rng)

        expected = pd.date_range('2015-05-01', periods=7, freq='D')
        np.testing.assert_array_equal(block.values, expected.values)

    def test_block_length_at_least_one(self, history):
        """Test that large length jitter never yields empty blocks."""
        sims = bootstrap(history, '2018-01-01', '2018-01-20', n_sims=5,
                         avg_block_len=1, delta_loc=3, delta_len=3, rng=11)
        for sim in sims:
            assert len(sim) == 20
            assert min(sim.block_lengths) >= 1


class TestLeapYears:
    """Tests around Feb 29."""

    def test_leap_window_from_mixed_history(self):
        """Test a leap-year window sampled from leap and non-leap years."""
        history = pd.date_range('2015-01-01', '2016-12-31', freq='D')

        sims = bootstrap(history, '2020-02-15', '2020-03-15', n_sims=20,
                         avg_block_len=5, delta_loc=3, delta_len=2, rng=3)

        for sim in sims:
            assert len(sim) == 30
            assert sim.sampled_dates.isin(history).all()


class TestYearUniformity:
    """Statistical tests for the year draw."""

    def test_years_roughly_uniform(self, history):
        """Test that each historical year gets a fair share of sampled days."""
        sims = bootstrap(history, '2018-01-01', '2018-01-31', n_sims=200,
                         avg_block_len=14, delta_loc=10, delta_len=4, rng=2024)

        years = np.concatenate([sim.sampled_dates.year for sim in sims])
        shares = pd.Series(years).value_counts(normalize=True)

        assert set(shares.index) == {2015, 2016, 2017}
        for share in shares.values:
            assert 0.2 < share < 0.45


class TestHistoricalDates:
    """Tests for the normalized history view."""

    def test_deduplicates_and_sorts(self):
        """Test normalization of mixed date-like input."""
        history = HistoricalDates([
            '2016-01-02', pd.Timestamp('2015-03-01 10:00'),
            pd.Timestamp('2015-03-01').date(), '2016-01-02 23:00'
        ])

        assert len(history) == 2
        assert history.first == pd.Timestamp('2015-03-01')
        assert history.last == pd.Timestamp('2016-01-02')
        assert history.years.tolist() == [2015, 2016]
        assert '2015-03-01' in history
        assert '2015-03-02' not in history

    def test_reused_across_calls(self, history):
        """Test that a prepared history can be passed directly."""
        prepared = HistoricalDates(history)
        sims = bootstrap(prepared, '2018-06-01', '2018-06-30', 2, 7, 2, 1, rng=0)
        assert all(len(sim) == 30 for sim in sims)


class TestSimulation:
    """Tests for the Simulation dataclass."""

    def test_length_mismatch_rejected(self):
        """Test that misaligned target and sampled dates are rejected."""
        with pytest.raises(ValueError):
            Simulation(
                sim_id=1,
                target_dates=pd.date_range('2018-01-01', periods=3, freq='D'),
                sampled_dates=pd.date_range('2015-01-01', periods=2, freq='D')
            )

    def test_simulate_path_directly(self, history):
        """Test building one simulation with an explicit generator."""
        sim = simulate_path(
            HistoricalDates(history),
            pd.Timestamp('2018-07-01'), pd.Timestamp('2018-07-10'),
            sim_id=9, avg_block_len=4, delta_loc=2, delta_len=1,
            rng=np.random.default_rng(0)
        )

        assert sim.sim_id == 9
        assert len(sim) == 10
        assert sim.n_blocks == len(sim.blocks())


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
