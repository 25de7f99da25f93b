#!/usr/bin/env python
"""
Run Block Bootstrap
===================
Load cleaned observations, bootstrap date sequences for a target window,
and write simulations, bootstrapped series, diagnostics and figures.

Usage:
    python scripts/run_bootstrap.py [--config CONFIG_PATH] [--input INPUT_PATH]
                                    [--start DATE] [--end DATE] [--n-sims N]
                                    [--seed SEED] [--n-jobs N] [--run-id RUN_ID|latest]

Outputs:
    - outputs/runs/<run_id>/simulations/simulations.parquet
    - outputs/runs/<run_id>/simulations/bootstrapped_series.parquet
    - outputs/runs/<run_id>/tables/coverage_report.json
    - outputs/runs/<run_id>/tables/bootstrap_summary.json
    - outputs/runs/<run_id>/figures/*.png
"""
import argparse
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.core import (
    Config, get_default_config, get_latest_run_id, create_run_directories, setup_logging,
    log_parameters, LogContext, save_json_numpy
)
from src.data_io import (
    load_and_prepare_observations, extract_historical_dates,
    join_simulations, save_simulations, save_table
)
from src.quality import generate_coverage_report, validate_history
from src.bootstrap import bootstrap, BootstrapError
from src.evaluation import summarize_bootstrap, block_lengths, check_simulation_alignment
from src.reporting import create_all_plots, set_plot_style


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Double seasonal block bootstrap of historical dates')
    parser.add_argument('--config', type=str, default=None,
                        help='Path to configuration file')
    parser.add_argument('--input', type=str, default=None,
                        help='Path to cleaned observation table (CSV or parquet)')
    parser.add_argument('--start', type=str, default=None,
                        help='First day of the target window (YYYY-MM-DD)')
    parser.add_argument('--end', type=str, default=None,
                        help='Last day of the target window (YYYY-MM-DD)')
    parser.add_argument('--n-sims', type=int, default=None,
                        help='Number of simulations')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed')
    parser.add_argument('--n-jobs', type=int, default=None,
                        help='Number of parallel workers')
    parser.add_argument('--run-id', type=str, default=None,
                        help="Run ID to use ('latest' reuses the most recent run)")
    parser.add_argument('--no-plots', action='store_true',
                        help='Skip figure generation')
    return parser.parse_args(argv)


def build_config(args) -> Config:
    """Load the configuration and apply command-line overrides."""
    if args.config and Path(args.config).exists():
        config = Config.load(args.config)
    else:
        config = get_default_config()

    if args.input:
        config.data.input_path = args.input
    if args.start:
        config.bootstrap.start_date = args.start
    if args.end:
        config.bootstrap.end_date = args.end
    if args.n_sims is not None:
        config.bootstrap.n_sims = args.n_sims
    if args.n_jobs is not None:
        config.bootstrap.n_jobs = args.n_jobs
    if args.seed is not None:
        config.seed = args.seed
    if args.run_id == 'latest':
        latest = get_latest_run_id(config.output.base_dir)
        if latest:
            config.run_id = latest
    elif args.run_id:
        config.run_id = args.run_id

    return config


def main(argv=None):
    args = parse_args(argv)
    config = build_config(args)

    dirs = create_run_directories(config)
    logger = setup_logging(log_dir=dirs['logs'], run_id=config.run_id)

    logger.info("=" * 60)
    logger.info("Double Seasonal Block Bootstrap")
    logger.info("=" * 60)
    logger.info(f"Run ID: {config.run_id}")
    log_parameters(logger, dict(vars(config.bootstrap), seed=config.seed), "Bootstrap settings")

    config.save(dirs['configs_snapshot'] / 'config.yaml')

    with LogContext(logger, "Load observations"):
        observations, metadata = load_and_prepare_observations(config.data)
        save_json_numpy(metadata, dirs['tables'] / 'observation_metadata.json')

    with LogContext(logger, "Audit historical coverage"):
        generate_coverage_report(observations, config.data.date_column, dirs['tables'])
        dates = extract_historical_dates(observations, config.data.date_column)
        validate_history(dates)

    bs = config.bootstrap
    try:
        with LogContext(logger, "Bootstrap"):
            simulations = bootstrap(
                dates,
                bs.start_date,
                bs.end_date,
                n_sims=bs.n_sims,
                avg_block_len=bs.avg_block_len,
                delta_loc=bs.delta_loc,
                delta_len=bs.delta_len,
                rng=config.seed,
                n_jobs=bs.n_jobs,
                max_retries=bs.max_retries
            )
    except BootstrapError as e:
        logger.error(f"Bootstrap failed: {e}")
        return 1

    problems = check_simulation_alignment(simulations)
    if problems:
        for p in problems:
            logger.error(p)
        return 1

    with LogContext(logger, "Join and save"):
        joined = join_simulations(
            simulations, observations,
            date_column=config.data.date_column,
            value_columns=[c for c in observations.columns if c != config.data.date_column]
        )
        if config.output.save_simulations:
            save_simulations(simulations, dirs['simulations'])
            save_table(joined, dirs['simulations'], 'bootstrapped_series')

        summary = summarize_bootstrap(simulations, years=sorted(set(dates.year)))
        save_json_numpy(summary.to_dict(), dirs['tables'] / 'bootstrap_summary.json')

    if not args.no_plots:
        with LogContext(logger, "Figures"):
            set_plot_style()
            saved = create_all_plots(
                summary.to_dict(),
                joined,
                block_lengths(simulations),
                config.data.value_columns,
                dirs['figures'],
                figure_format=config.output.figure_format,
                dpi=config.output.figure_dpi
            )
            logger.info(f"Saved {len(saved)} figures to {dirs['figures']}")

    logger.info("=" * 60)
    logger.info("Bootstrap complete!")
    logger.info(f"  Simulations: {len(simulations)} x {len(simulations[0])} days")
    logger.info(f"  Bootstrapped rows: {len(joined)}")
    logger.info(f"  Outputs saved to: {dirs['root']}")
    logger.info("=" * 60)

    return 0


if __name__ == '__main__':
    sys.exit(main())
