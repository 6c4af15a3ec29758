"""Tests for structured logging of planning decisions."""

from unittest.mock import Mock

from finplan_app.logging.config import (
    configure_logging,
    get_planning_logger,
    log_allocation,
    log_redistribution,
)


class TestPlanningLogging:
    """Test allocation and redistribution log entries."""

    def setup_method(self):
        configure_logging(level="DEBUG", format_json=True)
        self.mock_logger = Mock()
        self.bound = self.mock_logger.bind.return_value

    def test_allocation_entry(self):
        log_allocation(
            self.mock_logger,
            user_id="alice",
            total_available=1000.0,
            contributions={"high": 555.56, "medium": 333.33, "low": 111.11},
        )

        kwargs = self.mock_logger.bind.call_args.kwargs
        assert kwargs["decision"] == "allocation"
        assert kwargs["allocated_total"] == 1000.0
        assert kwargs["user_id"] == "alice"
        self.bound.info.assert_called_once_with("Monthly contributions allocated")

    def test_redistribution_entry_with_context(self):
        log_redistribution(
            self.mock_logger,
            user_id="alice",
            completed_goal_id="phone",
            excess=200.0,
            shares={"car": 133.33, "sofa": 66.67},
            context={"trigger": "add_amount"},
        )

        assert self.mock_logger.bind.call_args.kwargs["decision"] == "redistribution"
        self.bound.bind.assert_called_once_with(context={"trigger": "add_amount"})
        self.bound.bind.return_value.info.assert_called_once_with("Completed goal surplus redistributed")

    def test_engine_logs_allocation(self, engine, today):
        engine.planning_logger = self.mock_logger
        engine.create_goal("alice", {"id": "bike", "title": "Bike", "targetAmount": 800}, today=today)

        engine.update_plan("alice", today=today, monthly_income=5000.0)

        kwargs = self.mock_logger.bind.call_args.kwargs
        assert kwargs["contributions"] == {"bike": 1000.0}
        assert kwargs["total_available"] == 1000.0
