"""
Raw record normalization.

Converts camelCase records, as the REST API and document store hold them,
into the planner's immutable models.
"""
