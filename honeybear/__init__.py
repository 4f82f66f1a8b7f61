"""Fake shell, event storage, statistics and bear display for an SSH honey pot."""

__version__ = "1.0.1"