"""Default configuration parameters for the goal planning system."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PlanDefaults:
    """Financial plan used for users who never saved one."""
    monthly_income: float = 0.0
    savings_percentage: float = 20.0                 # Share of income earmarked for goals
    auto_distribute: bool = True                     # Re-allocate on every plan/goal change


@dataclass(frozen=True)
class GoalDefaults:
    """Values applied to newly created goals."""
    default_priority: int = 3                        # 1 = highest, 5 = lowest
    default_color: str = "#00FF00"
    auto_redistribute: bool = True


@dataclass(frozen=True)
class RoundingParams:
    """Currency rounding parameters."""
    currency_places: int = 2


@dataclass(frozen=True)
class RecurringParams:
    """Recurring transaction projection parameters."""
    default_occurrence_count: int = 5
    max_occurrence_count: int = 366


@dataclass(frozen=True)
class StoreParams:
    """SQLite store parameters."""
    db_path: str = "planner.db"


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    plan: PlanDefaults
    goal: GoalDefaults
    rounding: RoundingParams
    recurring: RecurringParams
    store: StoreParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        plan=PlanDefaults(),
        goal=GoalDefaults(),
        rounding=RoundingParams(),
        recurring=RecurringParams(),
        store=StoreParams(),
    )
