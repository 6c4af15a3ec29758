"""Tests for completed goal surplus redistribution"""

import pytest

from finplan_app.models.results import NoopReason
from finplan_app.planning.redistributor import (
    redistribute_on_completion,
    redistribute_with_result,
    redistribution_shares,
)


@pytest.fixture
def completion_goals(make_goal):
    """Completed goal 200 over target plus two active recipients."""
    return [
        make_goal("done", target_amount=1000.0, current_amount=1200.0, is_completed=True),
        make_goal("two", priority=2, current_amount=100.0),
        make_goal("four", priority=4, current_amount=50.0),
    ]


def by_id(goals):
    return {goal.id: goal for goal in goals}


class TestRedistribution:
    """Test priority-weighted surplus sharing"""

    def test_excess_split_by_priority(self, completion_goals):
        """Scores 4 and 2 split an excess of 200"""
        result = by_id(redistribute_on_completion(completion_goals, "done"))

        assert result["two"].current_amount == pytest.approx(100.0 + 133.333333, abs=1e-4)
        assert result["four"].current_amount == pytest.approx(50.0 + 66.666667, abs=1e-4)

    def test_shares_sum_to_excess(self, completion_goals):
        shares, reason = redistribution_shares(completion_goals, "done")

        assert reason is None
        assert sum(shares.values()) == pytest.approx(200.0)

    def test_completed_goal_keeps_its_amount(self, completion_goals):
        result = by_id(redistribute_on_completion(completion_goals, "done"))

        assert result["done"] == completion_goals[0]
        assert result["done"].current_amount == 1200.0

    def test_other_completed_goals_receive_nothing(self, completion_goals, make_goal):
        closed = make_goal("closed", priority=1, current_amount=500.0, is_completed=True)
        goals = completion_goals + [closed]

        result = by_id(redistribute_on_completion(goals, "done"))

        assert result["closed"] == closed
        assert result["two"].current_amount == pytest.approx(233.333333, abs=1e-4)

    def test_monthly_contribution_untouched(self, completion_goals):
        result = redistribute_on_completion(completion_goals, "done")

        assert [g.monthly_contribution for g in result] == [g.monthly_contribution for g in completion_goals]

    def test_each_goal_once_in_input_order(self, completion_goals):
        result = redistribute_on_completion(completion_goals, "done")

        assert [goal.id for goal in result] == ["done", "two", "four"]

    def test_input_is_not_modified(self, completion_goals):
        snapshot = list(completion_goals)

        redistribute_on_completion(completion_goals, "done")

        assert completion_goals == snapshot


class TestRedistributionNoops:
    """Test the situations where nothing is redistributed"""

    def test_unknown_goal(self, completion_goals):
        assert redistribute_on_completion(completion_goals, "missing") == completion_goals

        result = redistribute_with_result(completion_goals, "missing")
        assert result.reason is NoopReason.GOAL_NOT_FOUND

    def test_auto_redistribute_disabled(self, make_goal, completion_goals):
        goals = [make_goal("done", target_amount=1000.0, current_amount=1200.0,
                           is_completed=True, auto_redistribute=False)] + completion_goals[1:]

        assert redistribute_on_completion(goals, "done") == goals
        assert redistribute_with_result(goals, "done").reason is NoopReason.AUTO_REDISTRIBUTE_DISABLED

    @pytest.mark.parametrize("current_amount", [1000.0, 800.0])
    def test_no_excess(self, make_goal, completion_goals, current_amount):
        goals = [make_goal("done", target_amount=1000.0, current_amount=current_amount,
                           is_completed=True)] + completion_goals[1:]

        assert redistribute_on_completion(goals, "done") == goals
        assert redistribute_with_result(goals, "done").reason is NoopReason.NO_EXCESS

    def test_no_recipients_keeps_excess(self, make_goal, completion_goals):
        goals = [completion_goals[0], make_goal("closed", is_completed=True)]

        result = redistribute_on_completion(goals, "done")

        assert result == goals
        assert result[0].current_amount == 1200.0
        assert redistribute_with_result(goals, "done").reason is NoopReason.NO_RECIPIENTS

    def test_noop_returns_new_list(self, completion_goals):
        result = redistribute_on_completion(completion_goals, "missing")

        assert result is not completion_goals


class TestRedistributionResult:

    def test_changed_ids_are_recipients(self, completion_goals):
        result = redistribute_with_result(completion_goals, "done")

        assert not result.is_noop
        assert result.changed_ids == ["two", "four"]

    def test_out_of_range_priority_is_clamped(self, make_goal):
        goals = [
            make_goal("done", target_amount=100.0, current_amount=160.0, is_completed=True),
            make_goal("a", priority=-3),
            make_goal("b", priority=12),
        ]

        result = by_id(redistribute_on_completion(goals, "done"))

        assert result["a"].current_amount == pytest.approx(50.0)
        assert result["b"].current_amount == pytest.approx(10.0)
