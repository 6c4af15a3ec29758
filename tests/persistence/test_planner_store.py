"""Tests for the planner persistence layer."""

from dataclasses import replace
from datetime import date

import pytest

from finplan_app.errors import PersistenceError
from finplan_app.models.goals import FinancialPlan
from finplan_app.models.recurring import Frequency, RecurringTransaction, TransactionType
from finplan_app.persistence.planner_store import PlannerStore


class TestPlanPersistence:

    def test_missing_plan_returns_default(self, store):
        default = FinancialPlan(monthly_income=1.0, savings_percentage=2.0, auto_distribute=False)

        assert store.get_plan("alice", default=default) == default
        assert store.get_plan("alice") == FinancialPlan()

    def test_save_and_replace_plan(self, store):
        store.save_plan("alice", FinancialPlan(monthly_income=4000.0, savings_percentage=15.0))
        store.save_plan("alice", FinancialPlan(monthly_income=4500.0, savings_percentage=15.0,
                                               auto_distribute=False))

        assert store.get_plan("alice") == FinancialPlan(
            monthly_income=4500.0, savings_percentage=15.0, auto_distribute=False
        )
        assert store.get_plan("bob") == FinancialPlan()


class TestGoalPersistence:
    """Test goal storage."""

    def test_round_trip(self, store, make_goal):
        goal = make_goal(
            "trip",
            current_amount=120.5,
            deadline=date(2026, 9, 1),
            priority=2,
            monthly_contribution=80.25,
            auto_redistribute=False,
            category_id="travel",
            color="#ABCDEF",
        )

        store.save_goal("alice", goal)

        assert store.get_goal("alice", "trip") == goal
        assert store.list_goals("alice") == [goal]

    def test_list_keeps_creation_order_after_update(self, store, make_goal):
        goals = [make_goal("a"), make_goal("b"), make_goal("c")]
        store.save_goals("alice", goals)

        store.save_goal("alice", replace(goals[0], current_amount=99.0))

        assert [goal.id for goal in store.list_goals("alice")] == ["a", "b", "c"]
        assert store.get_goal("alice", "a").current_amount == 99.0

    def test_users_are_isolated(self, store, make_goal):
        store.save_goal("alice", make_goal("shared-id", title="Alice's"))

        store.save_goal("bob", make_goal("shared-id", title="Bob's"))

        assert store.get_goal("alice", "shared-id").title == "Alice's"
        assert store.get_goal("bob", "shared-id") is None
        assert store.list_goals("bob") == []

    def test_delete(self, store, make_goal):
        store.save_goal("alice", make_goal("a"))

        assert store.delete_goal("bob", "a") is False
        assert store.delete_goal("alice", "a") is True
        assert store.delete_goal("alice", "a") is False
        assert store.list_goals("alice") == []

    def test_save_nothing(self, store):
        store.save_goals("alice", [])
        assert store.list_goals("alice") == []


class TestRecurringPersistence:

    def test_round_trip_and_update(self, store):
        recurring = RecurringTransaction(
            id="rent",
            amount=1200.0,
            type=TransactionType.EXPENSE,
            category_id="housing",
            frequency=Frequency.MONTHLY,
            description="Rent",
            day_of_month=1,
            start_date=date(2026, 1, 1),
        )
        store.save_recurring("alice", recurring)
        store.save_recurring("alice", replace(recurring, last_processed=date(2026, 2, 1)))

        assert store.list_recurring("alice") == [
            ("alice", replace(recurring, last_processed=date(2026, 2, 1)))
        ]
        assert store.list_recurring("bob") == []
        assert store.list_recurring() == store.list_recurring("alice")

    def test_other_users_template_is_not_overwritten(self, store):
        alice = RecurringTransaction(
            id="r1", amount=100.0, type=TransactionType.INCOME,
            category_id="salary", frequency=Frequency.DAILY,
        )
        store.save_recurring("alice", alice)

        store.save_recurring("bob", replace(alice, amount=5.0, type=TransactionType.EXPENSE))

        assert store.list_recurring() == [("alice", alice)]
        assert store.recurring_owner("r1") == "alice"
        assert store.recurring_owner("r2") is None


class TestRecordOwnership:

    def test_goal_owner(self, store, make_goal):
        store.save_goal("alice", make_goal("trip"))

        assert store.goal_owner("trip") == "alice"
        assert store.goal_owner("other") is None

    def test_goal_of_other_user_is_not_overwritten(self, store, make_goal):
        store.save_goal("alice", make_goal("trip", title="Alice's"))

        store.save_goal("bob", make_goal("trip", title="Bob's"))

        assert store.get_goal("alice", "trip").title == "Alice's"
        assert store.goal_owner("trip") == "alice"


class TestStoreFailures:

    def test_unopenable_database(self, tmp_path):
        with pytest.raises(PersistenceError) as exc_info:
            PlannerStore(tmp_path)

        assert exc_info.value.operation == "init_schema"
        assert exc_info.value.recoverable is False
