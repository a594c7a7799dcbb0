"""
Monitor Service Package
=======================

Scheduling for the price and signal monitors.

Components:
- service.py: MonitorService, Schedule
"""

from .service import MonitorService, Schedule

__all__ = [
    "MonitorService",
    "Schedule",
]
