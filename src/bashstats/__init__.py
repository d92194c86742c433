"""bashstats: stats, badges and ranks for coding-agent sessions."""

__version__ = "0.1.0"
