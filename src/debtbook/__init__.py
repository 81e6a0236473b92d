"""Debtbook — personal debt/credit ledger.

Authenticated users keep records of who owes what: a total amount,
the balance still remaining, and the contact it concerns. Every record
belongs to exactly one user and is only ever visible to that user.
"""

__version__ = "0.1.0"
