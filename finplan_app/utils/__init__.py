"""
Utility functions module.

Calendar arithmetic and currency rounding shared across the planner.

Date Semantics:
- All planning math works on calendar dates, never on datetimes
- "Today" is always injectable so projections are reproducible
"""
