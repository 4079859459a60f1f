"""University catalog: import reconciliation, popularity counters and read queries."""

__version__ = "0.1.0"
