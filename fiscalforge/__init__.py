"""
FiscalForge - Source Package

The persistence and analytics core of a personal finance tracker.
A UI layer calls into this package to register and log in users,
record income and expenses, and read back totals, trends and exports.

DESIGN PRINCIPLES:
1. Every call names the user it acts for - no hidden session state
2. Money is Decimal from the form field to the aggregate
3. Fail early, fail visibly
4. Every significant action is logged
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "FiscalForge Team"
