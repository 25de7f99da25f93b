"""
Schema mapping for load/weather observation tables.
Maps the column names found in competition files to canonical names.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class ObservationSchema:
    """
    Canonical column names of a cleaned observation table.
    One row per (date, hour, zone) with weather/load fields.
    """
    date_column: str = "date"
    hour_column: str = "hour"
    zone_column: str = "zone"

    # Column name aliases (for flexible mapping)
    aliases: Dict[str, List[str]] = field(default_factory=lambda: {
        "date": ["date", "Date", "day", "datetime", "timestamp"],
        "hour": ["hour", "Hour", "hr", "hour_of_day"],
        "zone": ["zone", "Zone", "zone_id", "load_zone", "station_id"],
    })

    def find_column(self, df_columns: List[str], logical_name: str) -> Optional[str]:
        """
        Find the actual column in a table for a logical name.

        Args:
            df_columns: Column names of the table
            logical_name: 'date', 'hour' or 'zone'

        Returns:
            Actual column name if found, None otherwise
        """
        lowered = {str(col).lower(): col for col in df_columns}
        for alias in [logical_name] + self.aliases.get(logical_name, []):
            if alias.lower() in lowered:
                return lowered[alias.lower()]
        return None

    def canonical_names(self) -> Dict[str, str]:
        return {
            'date': self.date_column,
            'hour': self.hour_column,
            'zone': self.zone_column
        }

    def resolve_columns(self, df_columns: List[str]) -> Dict[str, str]:
        """
        Map found columns to canonical names.

        Returns:
            Dictionary {actual column: canonical column} for every logical
            column present in the table
        """
        renames = {}
        for logical, canonical in self.canonical_names().items():
            actual = self.find_column(df_columns, logical)
            if actual is not None:
                renames[actual] = canonical
        return renames


def create_default_schema() -> ObservationSchema:
    """Create default observation schema."""
    return ObservationSchema()
