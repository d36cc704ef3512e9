"""
Expense Tracker - Core Package

The data and aggregation core of a personal expense tracker:
expenses recorded against categories, kept in a local store,
and summarized by category and by month.

DESIGN PRINCIPLES:
1. One explicit store object per session, no ambient globals
2. Validate at every write boundary
3. A failed operation never changes state
4. Aggregations are pure functions over a snapshot
5. Storage backend is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
