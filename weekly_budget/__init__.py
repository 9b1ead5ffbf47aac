"""
Weekly Budget - Source Package

The core of a personal weekly budget tracker: records expenses and income
for the current week, archives the week when a new one begins, and derives
the totals shown to the user.

DESIGN PRINCIPLES:
1. Money is Decimal
2. Reads never block the user; writes the user asked for never fail silently
3. Every change and every swallowed failure is logged
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Weekly Budget Team"
