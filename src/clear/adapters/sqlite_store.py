"""SQLite storage adapter."""

import contextlib
import logging
import sqlite3
import time
import uuid
from datetime import date, datetime, timezone
from pathlib import Path

from clear.core.focus import MAX_SLOTS, DailyFocus
from clear.core.intake import DumpEntry
from clear.core.tasks import (
    ActivityEffect,
    ActivityType,
    Task,
    TaskActivity,
    TaskCandidate,
    TaskStatus,
)

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    email TEXT NOT NULL UNIQUE,
    created_at REAL NOT NULL
);

CREATE TABLE IF NOT EXISTS dump_entries (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    content TEXT NOT NULL,
    created_at REAL NOT NULL,
    processed INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS tasks (
    id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL,
    canonical_text TEXT NOT NULL,
    created_at REAL NOT NULL,
    last_seen_at REAL NOT NULL,
    repeat_count INTEGER NOT NULL DEFAULT 1,
    pressure_score REAL NOT NULL DEFAULT 0,
    leverage_score REAL NOT NULL DEFAULT 0,
    neglect_score REAL NOT NULL DEFAULT 0,
    scheduled_date TEXT,
    status TEXT NOT NULL DEFAULT 'open'
);

CREATE TABLE IF NOT EXISTS daily_focus (
    date TEXT NOT NULL,
    user_id TEXT NOT NULL,
    top_task_1 TEXT,
    top_task_2 TEXT,
    top_task_3 TEXT,
    top_task_4 TEXT,
    top_task_5 TEXT,
    avoided_task TEXT,
    daily_directive TEXT,
    accepted INTEGER NOT NULL DEFAULT 0,
    override_used INTEGER NOT NULL DEFAULT 0,
    UNIQUE (date, user_id)
);

CREATE TABLE IF NOT EXISTS task_activity (
    id TEXT PRIMARY KEY,
    task_id TEXT NOT NULL,
    user_id TEXT NOT NULL,
    date TEXT NOT NULL,
    activity_type TEXT NOT NULL,
    timestamp REAL NOT NULL
);

CREATE TABLE IF NOT EXISTS settings (
    user_id TEXT NOT NULL,
    key TEXT NOT NULL,
    value TEXT NOT NULL,
    PRIMARY KEY (user_id, key)
);

CREATE INDEX IF NOT EXISTS idx_tasks_user_status ON tasks(user_id, status);
CREATE INDEX IF NOT EXISTS idx_dumps_user_processed ON dump_entries(user_id, processed);
CREATE INDEX IF NOT EXISTS idx_activity_task ON task_activity(task_id, activity_type, timestamp);
"""

SLOT_COLUMNS = [f"top_task_{i}" for i in range(1, MAX_SLOTS + 1)]


def _new_id() -> str:
    return str(uuid.uuid4())


def _to_ts(value: datetime) -> float:
    return value.timestamp()


def _from_ts(value: float | None) -> datetime:
    return datetime.fromtimestamp(float(value or 0.0), tz=timezone.utc)


def _parse_date(value: str | None) -> date | None:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        logger.warning(f"Ignoring malformed stored date: {value!r}")
        return None


class SqliteStore:
    """
    SQLite store for every repository port.

    Implements TaskRepository, FocusRepository, ActivityRepository,
    SettingsRepository, DumpRepository and UserRepository.

    Each method opens its own connection, so one store can be shared between
    the CLI and scheduler threads. Uniqueness of the daily focus per
    (date, user) is enforced by the schema, not by callers.
    """

    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path).expanduser()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        logger.info(f"SqliteStore ready db={self.db_path}")

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.DatabaseError):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    @contextlib.contextmanager
    def _connection(self):
        conn = self._get_conn()
        try:
            yield conn
        finally:
            conn.close()

    def _ensure_schema(self) -> None:
        with self._connection() as conn:
            conn.executescript(SCHEMA)
            conn.commit()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=row["id"],
            user_id=row["user_id"],
            canonical_text=row["canonical_text"],
            created_at=_from_ts(row["created_at"]),
            last_seen_at=_from_ts(row["last_seen_at"]),
            repeat_count=int(row["repeat_count"] or 1),
            pressure_score=float(row["pressure_score"] or 0.0),
            leverage_score=float(row["leverage_score"] or 0.0),
            neglect_score=float(row["neglect_score"] or 0.0),
            scheduled_date=_parse_date(row["scheduled_date"]),
            status=TaskStatus(row["status"] or "open"),
        )

    @staticmethod
    def _row_to_focus(row: sqlite3.Row) -> DailyFocus:
        return DailyFocus(
            date=date.fromisoformat(row["date"]),
            user_id=row["user_id"],
            top_task_ids=[row[col] for col in SLOT_COLUMNS],
            avoided_task_id=row["avoided_task"],
            daily_directive=row["daily_directive"] or "",
            accepted=bool(row["accepted"]),
            override_used=bool(row["override_used"]),
        )

    @staticmethod
    def _row_to_dump(row: sqlite3.Row) -> DumpEntry:
        return DumpEntry(
            id=row["id"],
            user_id=row["user_id"],
            content=row["content"],
            created_at=_from_ts(row["created_at"]),
            processed=bool(row["processed"]),
        )

    @staticmethod
    def _row_to_activity(row: sqlite3.Row) -> TaskActivity:
        return TaskActivity(
            id=row["id"],
            task_id=row["task_id"],
            user_id=row["user_id"],
            date=date.fromisoformat(row["date"]),
            activity_type=ActivityType(row["activity_type"]),
            timestamp=_from_ts(row["timestamp"]),
        )

    # ---- users ----

    def add_user(self, email: str) -> str:
        user_id = _new_id()
        with self._connection() as conn:
            conn.execute(
                "INSERT INTO users(id, email, created_at) VALUES (?, ?, ?)",
                (user_id, email.strip().lower(), time.time()),
            )
            conn.commit()
        logger.info(f"User added id={user_id}")
        return user_id

    def list_user_ids(self) -> list[str]:
        with self._connection() as conn:
            rows = conn.execute("SELECT id FROM users ORDER BY created_at, rowid").fetchall()
        return [r["id"] for r in rows]

    # ---- dumps ----

    def add_dump(self, user_id: str, content: str) -> DumpEntry:
        entry = DumpEntry(
            id=_new_id(),
            user_id=user_id,
            content=content,
            created_at=datetime.now(timezone.utc),
        )
        with self._connection() as conn:
            conn.execute(
                "INSERT INTO dump_entries(id, user_id, content, created_at, processed) VALUES (?, ?, ?, ?, 0)",
                (entry.id, user_id, content, _to_ts(entry.created_at)),
            )
            conn.commit()
        return entry

    def list_dumps(self, user_id: str) -> list[DumpEntry]:
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT * FROM dump_entries WHERE user_id = ? ORDER BY created_at DESC, rowid DESC",
                (user_id,),
            ).fetchall()
        return [self._row_to_dump(r) for r in rows]

    def list_unprocessed(self, user_id: str) -> list[DumpEntry]:
        with self._connection() as conn:
            rows = conn.execute(
                """
                SELECT * FROM dump_entries
                WHERE user_id = ? AND processed = 0
                ORDER BY created_at ASC, rowid ASC
                """,
                (user_id,),
            ).fetchall()
        return [self._row_to_dump(r) for r in rows]

    # ---- tasks ----

    @staticmethod
    def _insert_task(conn: sqlite3.Connection, user_id: str, candidate: TaskCandidate, now: datetime) -> Task:
        task = Task(
            id=_new_id(),
            user_id=user_id,
            canonical_text=candidate.text,
            created_at=now,
            last_seen_at=now,
            pressure_score=candidate.pressure,
            leverage_score=candidate.leverage,
            neglect_score=0.0,
            scheduled_date=candidate.scheduled_date,
        )
        conn.execute(
            """
            INSERT INTO tasks(
                id, user_id, canonical_text, created_at, last_seen_at,
                repeat_count, pressure_score, leverage_score, neglect_score,
                scheduled_date, status
            )
            VALUES (?, ?, ?, ?, ?, 1, ?, ?, 0, ?, 'open')
            """,
            (
                task.id,
                user_id,
                task.canonical_text,
                _to_ts(now),
                _to_ts(now),
                task.pressure_score,
                task.leverage_score,
                task.scheduled_date.isoformat() if task.scheduled_date else None,
            ),
        )
        return task

    def create_task(self, user_id: str, candidate: TaskCandidate, now: datetime) -> Task:
        with self._connection() as conn:
            task = self._insert_task(conn, user_id, candidate, now)
            conn.commit()
        return task

    def store_extraction(
        self,
        dump_id: str,
        user_id: str,
        candidates: list[TaskCandidate],
        now: datetime,
    ) -> list[Task] | None:
        """
        Create a dump's tasks and mark it processed in one transaction.

        Either every task is written and the dump is marked processed, or
        nothing is. Returns None if the dump is missing, foreign or was
        already processed by a concurrent run.
        """
        conn = self._get_conn()
        try:
            conn.execute("BEGIN IMMEDIATE")
            cur = conn.execute(
                "UPDATE dump_entries SET processed = 1 WHERE id = ? AND user_id = ? AND processed = 0",
                (dump_id, user_id),
            )
            if cur.rowcount != 1:
                conn.rollback()
                return None
            created = [self._insert_task(conn, user_id, c, now) for c in candidates]
            conn.commit()
            return created
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_task(self, user_id: str, task_id: str) -> Task | None:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT * FROM tasks WHERE id = ? AND user_id = ?",
                (task_id, user_id),
            ).fetchone()
        return self._row_to_task(row) if row else None

    def list_tasks(self, user_id: str, statuses: list[TaskStatus] | None = None) -> list[Task]:
        sql = "SELECT * FROM tasks WHERE user_id = ?"
        params: list = [user_id]
        if statuses:
            sql += f" AND status IN ({','.join('?' for _ in statuses)})"
            params.extend(s.value for s in statuses)
        sql += " ORDER BY created_at ASC, id ASC"
        with self._connection() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [self._row_to_task(r) for r in rows]

    def update_neglect(self, task_id: str, neglect_score: float) -> None:
        with self._connection() as conn:
            conn.execute(
                "UPDATE tasks SET neglect_score = ? WHERE id = ?",
                (float(neglect_score), task_id),
            )
            conn.commit()

    def mark_seen(self, user_id: str, task_ids: list[str], now: datetime) -> None:
        if not task_ids:
            return
        placeholders = ",".join("?" for _ in task_ids)
        with self._connection() as conn:
            conn.execute(
                f"UPDATE tasks SET last_seen_at = ? WHERE user_id = ? AND id IN ({placeholders})",
                (_to_ts(now), user_id, *task_ids),
            )
            conn.commit()

    def update_text(self, user_id: str, task_id: str, text: str) -> bool:
        with self._connection() as conn:
            cur = conn.execute(
                """
                UPDATE tasks SET canonical_text = ?
                WHERE id = ? AND user_id = ? AND status != 'archived'
                """,
                (text, task_id, user_id),
            )
            conn.commit()
            return cur.rowcount == 1

    def archive(self, user_id: str, task_id: str) -> bool:
        with self._connection() as conn:
            cur = conn.execute(
                """
                UPDATE tasks SET status = 'archived'
                WHERE id = ? AND user_id = ? AND status != 'archived'
                """,
                (task_id, user_id),
            )
            conn.commit()
            return cur.rowcount == 1

    # ---- daily focus ----

    def get_focus(self, user_id: str, day: date) -> DailyFocus | None:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT * FROM daily_focus WHERE date = ? AND user_id = ?",
                (day.isoformat(), user_id),
            ).fetchone()
        return self._row_to_focus(row) if row else None

    def insert_focus(self, focus: DailyFocus) -> bool:
        """INSERT OR IGNORE: the loser of a concurrent race gets False."""
        slots = list(focus.top_task_ids[:MAX_SLOTS])
        slots += [None] * (MAX_SLOTS - len(slots))
        with self._connection() as conn:
            cur = conn.execute(
                f"""
                INSERT OR IGNORE INTO daily_focus(
                    date, user_id, {', '.join(SLOT_COLUMNS)},
                    avoided_task, daily_directive, accepted, override_used
                )
                VALUES (?, ?, {', '.join('?' for _ in SLOT_COLUMNS)}, ?, ?, ?, ?)
                """,
                (
                    focus.date.isoformat(),
                    focus.user_id,
                    *slots,
                    focus.avoided_task_id,
                    focus.daily_directive,
                    int(focus.accepted),
                    int(focus.override_used),
                ),
            )
            conn.commit()
            return cur.rowcount == 1

    def delete_focus(self, user_id: str, day: date) -> None:
        with self._connection() as conn:
            conn.execute(
                "DELETE FROM daily_focus WHERE date = ? AND user_id = ?",
                (day.isoformat(), user_id),
            )
            conn.commit()

    # ---- activity ----

    def apply_activity(
        self,
        user_id: str,
        task_id: str,
        effect: ActivityEffect,
        day: date,
        now: datetime,
    ) -> Task | None:
        """
        Apply an activity in one write transaction.

        BEGIN IMMEDIATE takes the write lock up front, so an undo's
        find-latest-done-then-delete cannot interleave with a new done.
        """
        conn = self._get_conn()
        try:
            conn.execute("BEGIN IMMEDIATE")
            row = conn.execute(
                "SELECT * FROM tasks WHERE id = ? AND user_id = ? AND status != 'archived'",
                (task_id, user_id),
            ).fetchone()
            if row is None:
                conn.rollback()
                return None

            if effect.append is not None:
                conn.execute(
                    """
                    INSERT INTO task_activity(id, task_id, user_id, date, activity_type, timestamp)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (_new_id(), task_id, user_id, day.isoformat(), effect.append.value, _to_ts(now)),
                )

            if effect.delete_latest_done:
                conn.execute(
                    """
                    DELETE FROM task_activity
                    WHERE id = (
                        SELECT id FROM task_activity
                        WHERE task_id = ? AND activity_type = 'done'
                        ORDER BY timestamp DESC, rowid DESC
                        LIMIT 1
                    )
                    """,
                    (task_id,),
                )

            new_status = effect.new_status.value if effect.new_status else None
            conn.execute(
                "UPDATE tasks SET last_seen_at = ?, status = COALESCE(?, status) WHERE id = ?",
                (_to_ts(now), new_status, task_id),
            )
            updated = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
            conn.commit()
            return self._row_to_task(updated)
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def list_activity(self, user_id: str, task_id: str | None = None) -> list[TaskActivity]:
        sql = "SELECT * FROM task_activity WHERE user_id = ?"
        params: list = [user_id]
        if task_id:
            sql += " AND task_id = ?"
            params.append(task_id)
        sql += " ORDER BY timestamp ASC, rowid ASC"
        with self._connection() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [self._row_to_activity(r) for r in rows]

    # ---- settings ----

    def get_settings(self, user_id: str) -> dict[str, str]:
        with self._connection() as conn:
            rows = conn.execute(
                "SELECT key, value FROM settings WHERE user_id = ?",
                (user_id,),
            ).fetchall()
        return {r["key"]: r["value"] for r in rows}

    def set_setting(self, user_id: str, key: str, value: str) -> None:
        with self._connection() as conn:
            conn.execute(
                """
                INSERT INTO settings(user_id, key, value) VALUES (?, ?, ?)
                ON CONFLICT(user_id, key) DO UPDATE SET value = excluded.value
                """,
                (user_id, key, value),
            )
            conn.commit()
