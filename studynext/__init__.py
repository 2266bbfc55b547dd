"""studynext: deadline aggregation, prioritization and completion sync."""

__version__ = "0.1.0"
