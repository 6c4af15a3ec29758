"""SQLite persistence for plans, goals and recurring transactions."""

from .planner_store import PlannerStore

__all__ = ["PlannerStore"]
