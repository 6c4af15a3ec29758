"""
Centralized logging configuration for the goal planning system.

All components log through structlog configured here so that allocation and
redistribution decisions share one structured format.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)
    """
    return structlog.get_logger(name)


def get_planning_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for goal planning decisions.

    Allocation and redistribution events logged through it carry an audit
    flag so they can be filtered out of the general stream.
    """
    return get_logger(name).bind(
        subsystem="goal_planning",
        audit_trail=True
    )


def log_allocation(
    logger: FilteringBoundLogger,
    user_id: str,
    total_available: float,
    contributions: dict[str, float],
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log the outcome of a contribution allocation.

    Args:
        logger: Structlog logger instance
        user_id: Owner of the goals
        total_available: Savings pool that was distributed
        contributions: Suggested monthly contribution per goal id
        context: Additional context data
    """
    bound_logger = logger.bind(
        user_id=user_id,
        total_available=total_available,
        contributions=contributions,
        allocated_total=round(sum(contributions.values()), 2),
        decision="allocation"
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("Monthly contributions allocated")


def log_redistribution(
    logger: FilteringBoundLogger,
    user_id: str,
    completed_goal_id: str,
    excess: float,
    shares: dict[str, float],
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log the surplus redistribution of a completed goal.

    Args:
        logger: Structlog logger instance
        user_id: Owner of the goals
        completed_goal_id: Goal whose surplus was redistributed
        excess: Surplus amount above the goal target
        shares: Amount added per recipient goal id
        context: Additional context data
    """
    bound_logger = logger.bind(
        user_id=user_id,
        completed_goal_id=completed_goal_id,
        excess=excess,
        shares=shares,
        decision="redistribution"
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("Completed goal surplus redistributed")
