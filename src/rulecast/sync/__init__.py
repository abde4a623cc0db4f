"""
Rule sync -- one set of authored rules, written out for every agent.
"""

from .engine import SyncEngine
from .models import SyncPlan, SyncReport

__all__ = ["SyncEngine", "SyncPlan", "SyncReport"]
