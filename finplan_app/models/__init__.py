"""
Data models and contracts module.

Immutable data structures for goals, financial plans, recurring transactions
and planning results. Updates produce new instances via dataclasses.replace.
"""
