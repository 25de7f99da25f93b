"""
End-to-end test of the bootstrap script.
"""
import importlib.util
import json

import matplotlib
matplotlib.use('Agg')

import pytest
import numpy as np
import pandas as pd

import sys
from pathlib import Path
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT))


def _load_script():
    spec = importlib.util.spec_from_file_location('run_bootstrap', ROOT / 'scripts' / 'run_bootstrap.py')
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def observation_file(tmp_path):
    """Daily load/temperature observations for 2015-2016."""
    dates = pd.date_range('2015-01-01', '2016-12-31', freq='D')
    rng = np.random.default_rng(0)
    df = pd.DataFrame({
        'Date': dates.strftime('%Y-%m-%d'),
        'load': 1000 + rng.normal(0, 50, len(dates)),
        'temperature': 15 + rng.normal(0, 5, len(dates))
    })
    path = tmp_path / 'observations.csv'
    df.to_csv(path, index=False)
    return path


class TestRunBootstrap:
    """Tests for the command-line entry point."""

    def test_full_run(self, observation_file, tmp_path, monkeypatch):
        """Test that a run writes simulations, summary and figures."""
        monkeypatch.chdir(tmp_path)
        script = _load_script()

        code = script.main([
            '--input', str(observation_file),
            '--start', '2018-01-01', '--end', '2018-01-31',
            '--n-sims', '5', '--seed', '3', '--run-id', 'run_test'
        ])

        run_dir = tmp_path / 'outputs' / 'runs' / 'run_test'
        assert code == 0
        assert (run_dir / 'configs_snapshot' / 'config.yaml').exists()
        assert (run_dir / 'tables' / 'coverage_report.json').exists()
        assert list((run_dir / 'simulations').glob('simulations.*'))
        assert list((run_dir / 'figures').glob('*.png'))

        summary = json.loads((run_dir / 'tables' / 'bootstrap_summary.json').read_text())
        assert summary['n_sims'] == 5
        assert summary['n_days'] == 31

    def test_invalid_window_fails(self, observation_file, tmp_path, monkeypatch):
        """Test that a reversed window is reported as a failed run."""
        monkeypatch.chdir(tmp_path)
        script = _load_script()

        code = script.main([
            '--input', str(observation_file),
            '--start', '2018-02-01', '--end', '2018-01-01',
            '--run-id', 'run_bad', '--no-plots'
        ])

        assert code == 1

    def test_overrides(self, tmp_path):
        """Test that command-line values override the config."""
        script = _load_script()
        args = script.parse_args(['--n-sims', '7', '--n-jobs', '2', '--seed', '11'])

        config = script.build_config(args)

        assert config.bootstrap.n_sims == 7
        assert config.bootstrap.n_jobs == 2
        assert config.seed == 11

    def test_latest_run_id(self, tmp_path, monkeypatch):
        """Test that 'latest' reuses the most recent run directory."""
        monkeypatch.chdir(tmp_path)
        for name in ('run_20180101_0000', 'run_20190101_0000'):
            (tmp_path / 'outputs' / 'runs' / name).mkdir(parents=True)
        script = _load_script()

        config = script.build_config(script.parse_args(['--run-id', 'latest']))

        assert config.run_id == 'run_20190101_0000'

    def test_latest_run_id_without_runs(self, tmp_path, monkeypatch):
        """Test that 'latest' falls back to a fresh run id when no run exists."""
        monkeypatch.chdir(tmp_path)
        script = _load_script()

        config = script.build_config(script.parse_args(['--run-id', 'latest']))

        assert config.run_id != 'latest'
        assert config.run_id.startswith('run_')


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
