"""ApplyWise: job application tracking, statistics and query views."""

__version__ = "0.1.0"
