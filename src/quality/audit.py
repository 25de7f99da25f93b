"""
Historical date coverage audit for the load bootstrap framework.
"""
import pandas as pd
from typing import Dict, Any, Iterable, List, Optional
from pathlib import Path

from ..core.logging_utils import get_logger
from ..core.utils import save_json_numpy, to_date_index


def check_missing_values(df: pd.DataFrame) -> pd.DataFrame:
    """
    Check for missing values in an observation table.

    Returns:
        DataFrame with missing value statistics per column
    """
    missing = df.isnull().sum()
    missing_pct = (missing / max(len(df), 1)) * 100

    report = pd.DataFrame({
        'column': df.columns,
        'missing_count': missing.values,
        'missing_pct': missing_pct.values,
        'dtype': df.dtypes.astype(str).values
    })

    return report.sort_values('missing_pct', ascending=False).reset_index(drop=True)


def find_date_gaps(dates: pd.DatetimeIndex) -> List[Dict[str, Any]]:
    """Runs of missing days between consecutive historical dates."""
    gaps = []
    for prev, curr in zip(dates[:-1], dates[1:]):
        diff = (curr - prev).days
        if diff > 1:
            gaps.append({
                'from': prev,
                'to': curr,
                'missing_days': diff - 1
            })
    return gaps


def check_date_coverage(dates: Iterable) -> Dict[str, Any]:
    """
    Describe how completely a set of dates covers its span.

    Args:
        dates: Historical dates

    Returns:
        Dictionary with span, years, complete calendar years and gaps
    """
    index = to_date_index(dates)
    if len(index) == 0:
        return {'n_dates': 0, 'years': [], 'full_years': [], 'n_missing_days': 0, 'gaps': []}

    counts = pd.Series(1, index=index).groupby(index.year).sum()
    full_years = [
        int(year) for year, n in counts.items()
        if n == pd.Timestamp(year=int(year), month=12, day=31).dayofyear
    ]

    span_days = (index[-1] - index[0]).days + 1
    gaps = find_date_gaps(index)

    return {
        'n_dates': len(index),
        'start': index[0],
        'end': index[-1],
        'span_days': span_days,
        'years': [int(y) for y in counts.index],
        'dates_per_year': {int(y): int(n) for y, n in counts.items()},
        'full_years': full_years,
        'n_missing_days': span_days - len(index),
        'gaps': gaps
    }


def validate_history(dates: Iterable, min_full_years: int = 1) -> bool:
    """
    Check that the history can support a bootstrap.

    Returns False when fewer than ``min_full_years`` complete calendar
    years are present. Gaps inside the span only log a warning.
    """
    logger = get_logger()
    coverage = check_date_coverage(dates)

    if coverage['n_dates'] == 0:
        logger.warning("No historical dates")
        return False

    valid = True
    if len(coverage['full_years']) < min_full_years:
        logger.warning(
            f"Only {len(coverage['full_years'])} full calendar years in history "
            f"(need {min_full_years}); sampling may exhaust its retries"
        )
        valid = False

    if coverage['gaps']:
        logger.warning(
            f"History has {len(coverage['gaps'])} gaps ({coverage['n_missing_days']} missing days); "
            f"blocks spanning a gap are rejected"
        )

    return valid


def generate_coverage_report(
    df: pd.DataFrame,
    date_column: str = 'date',
    output_dir: Optional[Path] = None
) -> Dict[str, Any]:
    """
    Generate a coverage and missing-value report for an observation table.

    Args:
        df: Observation table
        date_column: Date column
        output_dir: Directory to save report (optional)

    Returns:
        Dictionary with the report
    """
    logger = get_logger()
    logger.info("Generating coverage report...")

    missing_report = check_missing_values(df)
    report = {
        'summary': {
            'n_rows': len(df),
            'n_columns': len(df.columns)
        },
        'coverage': check_date_coverage(df[date_column]),
        'missing_values': missing_report.to_dict(orient='records')
    }

    if output_dir is not None:
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        missing_report.to_csv(output_dir / 'missing_values.csv', index=False)
        save_json_numpy(report, output_dir / 'coverage_report.json')
        logger.info(f"Coverage report saved to: {output_dir}")

    return report
