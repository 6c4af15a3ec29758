"""Goal contribution planning: allocation, redistribution and deposits."""

from .allocator import allocate, allocate_with_result
from .contributions import apply_contribution
from .priority import clamp_priority, priority_score, priority_weights
from .redistributor import redistribute_on_completion, redistribute_with_result

__all__ = [
    "allocate",
    "allocate_with_result",
    "apply_contribution",
    "clamp_priority",
    "priority_score",
    "priority_weights",
    "redistribute_on_completion",
    "redistribute_with_result",
]
