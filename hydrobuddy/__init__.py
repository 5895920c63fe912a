"""Track daily water intake, keep weekly statistics and get reminded to drink."""

__version__ = "0.1.0"