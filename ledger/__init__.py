"""
Personal Ledger - Source Package

A local-first personal finance ledger: record income and expense
transactions, search and sort them, and keep a persisted snapshot.

DESIGN PRINCIPLES:
1. One authoritative store per session, passed explicitly
2. Fail early on bad input, never silently coerce
3. Persistence and search failures degrade, they never crash the app
4. Every mutation is auditable
5. Storage backend is swappable
"""

__version__ = "1.0.0"
__author__ = "Personal Ledger Team"
