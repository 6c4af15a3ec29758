"""
FinPlan App - Savings Goal Planning Engine

Computes suggested monthly contributions for a user's savings goals from a
financial plan, redistributes the surplus of completed goals, and projects
recurring transactions.
"""

__version__ = "0.1.0"
__author__ = "FinPlan Team"
