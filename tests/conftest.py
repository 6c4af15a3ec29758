"""Pytest configuration and shared fixtures."""

from datetime import date
from pathlib import Path

import pytest

from finplan_app.engine import GoalPlanningEngine
from finplan_app.models.goals import FinancialPlan, Goal
from finplan_app.persistence.planner_store import PlannerStore

TODAY = date(2026, 1, 15)


@pytest.fixture
def today() -> date:
    """Fixed reference date (a Thursday) for deadline and schedule math."""
    return TODAY


@pytest.fixture
def make_goal():
    """Factory for goals with sensible defaults."""
    def _make_goal(goal_id: str, **overrides) -> Goal:
        values = {
            "id": goal_id,
            "title": f"Goal {goal_id}",
            "target_amount": 10000.0,
            "current_amount": 0.0,
        }
        values.update(overrides)
        return Goal(**values)
    return _make_goal


@pytest.fixture
def sample_plan() -> FinancialPlan:
    """Plan with a 1000 per month savings pool."""
    return FinancialPlan(monthly_income=5000.0, savings_percentage=20.0, auto_distribute=True)


@pytest.fixture
def three_goals(make_goal) -> list[Goal]:
    """Active goals with priorities 1, 3 and 5 and no deadlines."""
    return [
        make_goal("high", priority=1),
        make_goal("medium", priority=3),
        make_goal("low", priority=5),
    ]


@pytest.fixture
def store(tmp_path: Path) -> PlannerStore:
    return PlannerStore(tmp_path / "planner.db")


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Empty configuration directory, so only built-in defaults apply."""
    path = tmp_path / "config"
    path.mkdir()
    return path


@pytest.fixture
def engine(store: PlannerStore, config_dir: Path) -> GoalPlanningEngine:
    return GoalPlanningEngine(store=store, config_dir=config_dir)
