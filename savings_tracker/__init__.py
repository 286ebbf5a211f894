"""
Savings Tracker - Source Package

A personal finance tracker for savings goals, scheduled payments
and wishlist items, kept in a local key-value store.

DESIGN PRINCIPLES:
1. Every mutation replaces the whole collection (copy-on-write)
2. Core date/money math is pure and takes an explicit "today"
3. Stale references are no-ops, never crashes
4. Completed cycles are kept as history, never rewritten
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Savings Tracker Team"
