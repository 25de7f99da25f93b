"""
Data quality module for the load bootstrap framework.
"""
from .audit import (
    check_missing_values,
    find_date_gaps,
    check_date_coverage,
    validate_history,
    generate_coverage_report
)

__all__ = [
    'check_missing_values',
    'find_date_gaps',
    'check_date_coverage',
    'validate_history',
    'generate_coverage_report'
]
