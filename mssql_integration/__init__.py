"""Microsoft SQL Server integration: pooled table and query actions for a bot platform."""

__version__ = "1.0.1"
