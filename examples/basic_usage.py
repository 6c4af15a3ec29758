#!/usr/bin/env python3
"""
Basic Usage Example - Goal Planning Engine

This script demonstrates the basic usage of the goal planning engine with a
throwaway SQLite database. It shows how to:
- Set a monthly income and savings percentage
- Create savings goals and read their suggested contributions
- Complete a goal and watch its surplus flow to the others
- Project a recurring transaction

Run: python examples/basic_usage.py
"""

import tempfile
from datetime import date
from pathlib import Path

from finplan_app.engine import GoalPlanningEngine
from finplan_app.logging import configure_logging
from finplan_app.persistence import PlannerStore

TODAY = date(2026, 1, 15)


def print_goals(engine: GoalPlanningEngine, user_id: str) -> None:
    for goal in engine.list_goals(user_id):
        status = "done" if goal.is_completed else f"{goal.progress_pct:5.1f}%"
        print(f"  {goal.title:<12} priority={goal.priority} "
              f"saved={goal.current_amount:>9.2f} monthly={goal.monthly_contribution:>8.2f} [{status}]")


def main() -> None:
    configure_logging(level="WARNING")

    with tempfile.TemporaryDirectory() as tmp:
        engine = GoalPlanningEngine(store=PlannerStore(Path(tmp) / "planner.db"))
        user_id = "example-user"

        engine.update_plan(user_id, today=TODAY, monthly_income=5000.0, savings_percentage=20.0)
        engine.create_goal(user_id, {"id": "phone", "title": "New phone", "targetAmount": 1000,
                                     "currentAmount": 900}, today=TODAY)
        engine.create_goal(user_id, {"id": "car", "title": "Car", "targetAmount": 8000,
                                     "priority": 2, "deadline": "2027-01-15"}, today=TODAY)
        engine.create_goal(user_id, {"id": "sofa", "title": "Sofa", "targetAmount": 2000,
                                     "priority": 4}, today=TODAY)

        print("Suggested contributions:")
        print_goals(engine, user_id)

        _goal, result = engine.add_amount(user_id, "phone", 300, today=TODAY)
        print(f"\nDeposited 300 into the phone goal ({result.status.value}):")
        print_goals(engine, user_id)

        engine.add_recurring(user_id, {"id": "rent", "amount": 900, "type": "expense",
                                       "category": "housing", "frequency": "monthly",
                                       "dayOfMonth": 31})
        upcoming = engine.upcoming_occurrences(user_id, "rent", from_date=TODAY)
        print("\nUpcoming rent dates:", ", ".join(d.isoformat() for d in upcoming))


if __name__ == "__main__":
    main()
