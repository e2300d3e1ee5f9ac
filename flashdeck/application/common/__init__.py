"""
Application common module.

Contains base classes for the application layer:
- UnitOfWork: Transaction boundary that dispatches domain events after commit
- Clock: Injectable source of the current time
"""

from .clock import Clock, local_date, utc_now
from .unit_of_work import EventHandler, UnitOfWork

__all__ = ["Clock", "EventHandler", "UnitOfWork", "local_date", "utc_now"]
