"""
Adapters layer - Schedule data sources.
"""

from .json_schedule_store import JsonScheduleStore

__all__ = ["JsonScheduleStore"]
