"""Engine for a SQL query editor: alias resolution, highlighting, settings, result tables and charts."""

__version__ = "0.1.0"