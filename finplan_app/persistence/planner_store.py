"""Goal, financial plan and recurring transaction persistence."""

import sqlite3
import threading
from contextlib import contextmanager
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, Optional, Union

import structlog

from ..errors import PersistenceError
from ..models.goals import FinancialPlan, Goal
from ..models.recurring import Frequency, RecurringTransaction, TransactionType
from ..utils.dates import format_date, parse_date

SCHEMA = """
CREATE TABLE IF NOT EXISTS financial_plans (
    user_id TEXT PRIMARY KEY,
    monthly_income REAL NOT NULL,
    savings_percentage REAL NOT NULL,
    auto_distribute INTEGER NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS goals (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    title TEXT NOT NULL,
    target_amount REAL NOT NULL,
    current_amount REAL NOT NULL DEFAULT 0,
    deadline TEXT,
    priority INTEGER NOT NULL DEFAULT 3,
    monthly_contribution REAL NOT NULL DEFAULT 0,
    auto_redistribute INTEGER NOT NULL DEFAULT 1,
    is_completed INTEGER NOT NULL DEFAULT 0,
    category_id TEXT,
    color TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_goals_user_id ON goals(user_id);

CREATE TABLE IF NOT EXISTS recurring_transactions (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    amount REAL NOT NULL,
    type TEXT NOT NULL,
    category_id TEXT NOT NULL,
    frequency TEXT NOT NULL,
    description TEXT,
    day_of_week INTEGER,
    day_of_month INTEGER,
    month INTEGER,
    start_date TEXT,
    end_date TEXT,
    last_processed TEXT,
    auto_generate INTEGER NOT NULL DEFAULT 1,
    require_confirmation INTEGER NOT NULL DEFAULT 0,
    active INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_recurring_user_id ON recurring_transactions(user_id);
"""

RECURRING_COLUMNS = (
    "id", "user_id", "amount", "type", "category_id", "frequency", "description",
    "day_of_week", "day_of_month", "month", "start_date", "end_date",
    "last_processed", "auto_generate", "require_confirmation", "active", "created_at",
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class PlannerStore:
    """SQLite-based store for per-user planning data."""

    def __init__(self, db_path: Union[str, Path] = "planner.db"):
        self.db_path = Path(db_path)
        self.logger = structlog.get_logger("planner.store")
        self._lock = threading.Lock()

        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        with self._get_connection("init_schema") as conn:
            conn.executescript(SCHEMA)
            conn.commit()

    @contextmanager
    def _get_connection(self, operation: str) -> Iterator[sqlite3.Connection]:
        """Get database connection, converting SQLite failures to PersistenceError."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=30.0)
            conn.row_factory = sqlite3.Row
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            self.logger.error("Database error", operation=operation, error=str(e))
            raise PersistenceError(
                f"Database error during {operation}: {e}",
                operation=operation,
                target=str(self.db_path)
            ) from e
        finally:
            if conn:
                conn.close()

    # Financial plans

    def get_plan(self, user_id: str, default: Optional[FinancialPlan] = None) -> FinancialPlan:
        """Get a user's financial plan, falling back to default when none is saved."""
        with self._get_connection("get_plan") as conn:
            row = conn.execute(
                "SELECT * FROM financial_plans WHERE user_id = ?", (user_id,)
            ).fetchone()

        if row is None:
            return default or FinancialPlan()

        return FinancialPlan(
            monthly_income=row["monthly_income"],
            savings_percentage=row["savings_percentage"],
            auto_distribute=bool(row["auto_distribute"]),
        )

    def save_plan(self, user_id: str, plan: FinancialPlan) -> None:
        with self._lock:
            with self._get_connection("save_plan") as conn:
                conn.execute("""
                    INSERT OR REPLACE INTO financial_plans (
                        user_id, monthly_income, savings_percentage, auto_distribute, updated_at
                    ) VALUES (?, ?, ?, ?, ?)
                """, (
                    user_id,
                    plan.monthly_income,
                    plan.savings_percentage,
                    int(plan.auto_distribute),
                    _now()
                ))
                conn.commit()

        self.logger.debug("Financial plan saved", user_id=user_id)

    # Goals

    def list_goals(self, user_id: str) -> list[Goal]:
        """Get all goals of a user in creation order."""
        with self._get_connection("list_goals") as conn:
            rows = conn.execute(
                "SELECT * FROM goals WHERE user_id = ? ORDER BY created_at, rowid",
                (user_id,)
            ).fetchall()

        return [self._row_to_goal(row) for row in rows]

    def get_goal(self, user_id: str, goal_id: str) -> Optional[Goal]:
        with self._get_connection("get_goal") as conn:
            row = conn.execute(
                "SELECT * FROM goals WHERE user_id = ? AND id = ?",
                (user_id, goal_id)
            ).fetchone()

        return self._row_to_goal(row) if row else None

    def save_goal(self, user_id: str, goal: Goal) -> None:
        """Insert or update a single goal."""
        self.save_goals(user_id, [goal])

    def save_goals(self, user_id: str, goals: list[Goal]) -> None:
        """Insert or update several goals in one transaction."""
        if not goals:
            return

        with self._lock:
            with self._get_connection("save_goals") as conn:
                now = _now()
                for goal in goals:
                    conn.execute("""
                        INSERT INTO goals (
                            id, user_id, title, target_amount, current_amount, deadline,
                            priority, monthly_contribution, auto_redistribute, is_completed,
                            category_id, color, created_at, updated_at
                        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                        ON CONFLICT(id) DO UPDATE SET
                            title = excluded.title,
                            target_amount = excluded.target_amount,
                            current_amount = excluded.current_amount,
                            deadline = excluded.deadline,
                            priority = excluded.priority,
                            monthly_contribution = excluded.monthly_contribution,
                            auto_redistribute = excluded.auto_redistribute,
                            is_completed = excluded.is_completed,
                            category_id = excluded.category_id,
                            color = excluded.color,
                            updated_at = excluded.updated_at
                        WHERE goals.user_id = excluded.user_id
                    """, (
                        goal.id,
                        user_id,
                        goal.title,
                        goal.target_amount,
                        goal.current_amount,
                        format_date(goal.deadline),
                        goal.priority,
                        goal.monthly_contribution,
                        int(goal.auto_redistribute),
                        int(goal.is_completed),
                        goal.category_id,
                        goal.color,
                        now,
                        now
                    ))
                conn.commit()

        self.logger.debug("Goals saved", user_id=user_id, count=len(goals))

    def delete_goal(self, user_id: str, goal_id: str) -> bool:
        """Delete a goal, returning False when the user has no such goal."""
        with self._lock:
            with self._get_connection("delete_goal") as conn:
                cursor = conn.execute(
                    "DELETE FROM goals WHERE user_id = ? AND id = ?",
                    (user_id, goal_id)
                )
                conn.commit()
                deleted = cursor.rowcount > 0

        self.logger.debug("Goal delete", user_id=user_id, goal_id=goal_id, deleted=deleted)
        return deleted

    # Recurring transactions

    def list_recurring(self, user_id: Optional[str] = None) -> list[tuple[str, RecurringTransaction]]:
        """Get (user_id, recurring transaction) pairs, optionally for one user."""
        with self._get_connection("list_recurring") as conn:
            if user_id is None:
                rows = conn.execute(
                    "SELECT * FROM recurring_transactions ORDER BY created_at, rowid"
                ).fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM recurring_transactions WHERE user_id = ? ORDER BY created_at, rowid",
                    (user_id,)
                ).fetchall()

        return [(row["user_id"], self._row_to_recurring(row)) for row in rows]

    def save_recurring(self, user_id: str, recurring: RecurringTransaction) -> None:
        """Insert or update a recurring transaction; a template owned by another user is left untouched."""
        record = asdict(recurring)
        record.update(
            user_id=user_id,
            type=recurring.type.value,
            frequency=recurring.frequency.value,
            start_date=format_date(recurring.start_date),
            end_date=format_date(recurring.end_date),
            last_processed=format_date(recurring.last_processed),
            auto_generate=int(recurring.auto_generate),
            require_confirmation=int(recurring.require_confirmation),
            active=int(recurring.active),
            created_at=_now(),
        )
        columns = ", ".join(RECURRING_COLUMNS)
        placeholders = ", ".join("?" for _ in RECURRING_COLUMNS)
        updates = ", ".join(
            f"{column} = excluded.{column}"
            for column in RECURRING_COLUMNS
            if column not in ("id", "user_id", "created_at")
        )

        with self._lock:
            with self._get_connection("save_recurring") as conn:
                conn.execute(
                    f"INSERT INTO recurring_transactions ({columns}) VALUES ({placeholders}) "
                    f"ON CONFLICT(id) DO UPDATE SET {updates} "
                    "WHERE recurring_transactions.user_id = excluded.user_id",
                    tuple(record[column] for column in RECURRING_COLUMNS)
                )
                conn.commit()

    def goal_owner(self, goal_id: str) -> Optional[str]:
        """Id of the user owning a goal id, or None when the id is free."""
        return self._owner("goals", goal_id)

    def recurring_owner(self, recurring_id: str) -> Optional[str]:
        return self._owner("recurring_transactions", recurring_id)

    def _owner(self, table: str, record_id: str) -> Optional[str]:
        with self._get_connection(f"{table}_owner") as conn:
            row = conn.execute(f"SELECT user_id FROM {table} WHERE id = ?", (record_id,)).fetchone()

        return row["user_id"] if row else None

    def _row_to_goal(self, row: sqlite3.Row) -> Goal:
        return Goal(
            id=row["id"],
            title=row["title"],
            target_amount=row["target_amount"],
            current_amount=row["current_amount"],
            deadline=parse_date(row["deadline"]),
            priority=row["priority"],
            monthly_contribution=row["monthly_contribution"],
            auto_redistribute=bool(row["auto_redistribute"]),
            is_completed=bool(row["is_completed"]),
            category_id=row["category_id"],
            color=row["color"],
        )

    def _row_to_recurring(self, row: sqlite3.Row) -> RecurringTransaction:
        values: dict[str, Any] = dict(row)
        return RecurringTransaction(
            id=values["id"],
            amount=values["amount"],
            type=TransactionType(values["type"]),
            category_id=values["category_id"],
            frequency=Frequency(values["frequency"]),
            description=values["description"],
            day_of_week=values["day_of_week"],
            day_of_month=values["day_of_month"],
            month=values["month"],
            start_date=parse_date(values["start_date"]),
            end_date=parse_date(values["end_date"]),
            last_processed=parse_date(values["last_processed"]),
            auto_generate=bool(values["auto_generate"]),
            require_confirmation=bool(values["require_confirmation"]),
            active=bool(values["active"]),
        )
