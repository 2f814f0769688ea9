"""RecordSmith - load delimited or JSON records and re-export them through profiles."""

__version__ = "0.1.0"
