"""Configuration and financial plan validation utilities."""

import math
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    """Finite int or float; bools, inf and nan are rejected."""
    return (isinstance(value, (int, float)) and not isinstance(value, bool)
            and math.isfinite(value))


class ConfigValidator:
    """Validates configuration parameters and financial plan values."""

    @staticmethod
    def validate_plan(params: dict[str, Any]) -> list[ValidationError]:
        """Validate financial plan values."""
        errors = []

        # Validate monthly_income
        if "monthly_income" in params:
            value = params["monthly_income"]
            if not _is_number(value) or value < 0:
                errors.append(ValidationError(
                    field="monthly_income",
                    message="Must be a finite non-negative number",
                    value=value
                ))

        # Validate savings_percentage
        if "savings_percentage" in params:
            value = params["savings_percentage"]
            if not _is_number(value) or value < 0 or value > 100:
                errors.append(ValidationError(
                    field="savings_percentage",
                    message="Must be a number between 0 and 100",
                    value=value
                ))

        # Validate auto_distribute
        if "auto_distribute" in params:
            value = params["auto_distribute"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="auto_distribute",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_goal_defaults(params: dict[str, Any]) -> list[ValidationError]:
        """Validate goal default parameters."""
        errors = []

        if "default_priority" in params:
            value = params["default_priority"]
            if not isinstance(value, int) or isinstance(value, bool) or not 1 <= value <= 5:
                errors.append(ValidationError(
                    field="default_priority",
                    message="Must be an integer between 1 and 5",
                    value=value
                ))

        if "auto_redistribute" in params:
            value = params["auto_redistribute"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="auto_redistribute",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_recurring_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate recurring transaction parameters."""
        errors = []

        for field in ("default_occurrence_count", "max_occurrence_count"):
            if field in params:
                value = params[field]
                if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                    errors.append(ValidationError(
                        field=field,
                        message="Must be a positive integer",
                        value=value
                    ))

        default_count = params.get("default_occurrence_count")
        max_count = params.get("max_occurrence_count")
        if (isinstance(default_count, int) and isinstance(max_count, int)
                and default_count > max_count):
            errors.append(ValidationError(
                field="default_occurrence_count",
                message="Must not exceed max_occurrence_count",
                value=default_count
            ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "plan" in config:
            errors.extend(ConfigValidator.validate_plan(config["plan"]))

        if "goal" in config:
            errors.extend(ConfigValidator.validate_goal_defaults(config["goal"]))

        if "recurring" in config:
            errors.extend(ConfigValidator.validate_recurring_params(config["recurring"]))

        if "rounding" in config:
            value = config["rounding"].get("currency_places")
            if value is not None and (not isinstance(value, int) or value < 0):
                errors.append(ValidationError(
                    field="currency_places",
                    message="Must be a non-negative integer",
                    value=value
                ))

        return errors
