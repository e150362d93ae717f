"""Scan scheduling and alert cooldown."""

from .cooldown import CooldownTracker
from .scheduler import ScanScheduler, ScanSummary

__all__ = ["CooldownTracker", "ScanScheduler", "ScanSummary"]
