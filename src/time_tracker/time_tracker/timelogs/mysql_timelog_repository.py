from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import day_bounds
from ..core.enums import BreakStatus, SessionStatus
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_hours, db_cursor, fetchall, fetchone, is_duplicate_key
from .model import BreakInterval, TimeSession
from .repository import TimeSessionRepository

logger = logging.getLogger(__name__)

_SESSION_COLUMNS = """
    session_id, employee_id, login_time, logout_time, status,
    total_hours, total_break_hours, net_work_hours, adjusted_hours,
    lunch_break_deducted, notes, version
"""


class MySQLTimeSessionRepository(TimeSessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_break(r: dict[str, Any]) -> BreakInterval:
        return BreakInterval(
            start_time=r["start_time"],
            end_time=r.get("end_time"),
            status=BreakStatus(r["status"]),
            duration=as_hours(r.get("duration")) or 0.0,
        )

    @staticmethod
    def _to_session(r: dict[str, Any], breaks: Sequence[BreakInterval]) -> TimeSession:
        return TimeSession(
            session_id=int(r["session_id"]),
            employee_id=str(r["employee_id"]),
            login_time=r["login_time"],
            logout_time=r.get("logout_time"),
            status=SessionStatus(r["status"]),
            breaks=tuple(breaks),
            total_break_hours=as_hours(r.get("total_break_hours")) or 0.0,
            total_hours=as_hours(r.get("total_hours")) or 0.0,
            net_work_hours=as_hours(r.get("net_work_hours")),
            adjusted_hours=as_hours(r.get("adjusted_hours")),
            lunch_break_deducted=bool(r.get("lunch_break_deducted")),
            notes=r.get("notes"),
            version=int(r.get("version") or 0),
        )

    def _hydrate(self, cur, rows: list[dict[str, Any]]) -> list[TimeSession]:
        if not rows:
            return []

        ids = [int(r["session_id"]) for r in rows]
        placeholders = ",".join(["%s"] * len(ids))
        cur.execute(
            f"""
            SELECT session_id, seq, start_time, end_time, status, duration
            FROM session_breaks
            WHERE session_id IN ({placeholders})
            ORDER BY session_id, seq
            """,
            tuple(ids),
        )
        by_session: dict[int, list[BreakInterval]] = {}
        for b in fetchall(cur):
            by_session.setdefault(int(b["session_id"]), []).append(self._to_break(b))

        return [self._to_session(r, by_session.get(int(r["session_id"]), [])) for r in rows]

    def get_by_id(self, session_id: int) -> Optional[TimeSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SESSION_COLUMNS} FROM time_sessions WHERE session_id=%s", (int(session_id),))
            r = fetchone(cur)
            if not r:
                return None
            return self._hydrate(cur, [r])[0]

    def get_active_for_employee(self, employee_id: str) -> Optional[TimeSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_SESSION_COLUMNS} FROM time_sessions WHERE employee_id=%s AND status=%s",
                (employee_id, SessionStatus.ACTIVE.value),
            )
            r = fetchone(cur)
            if not r:
                return None
            return self._hydrate(cur, [r])[0]

    def insert_active(self, *, employee_id: str, login_time: datetime) -> TimeSession:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO time_sessions(employee_id, login_time, status)
                    VALUES(%s,%s,%s)
                    """,
                    (employee_id, login_time, SessionStatus.ACTIVE.value),
                )
                session_id = int(cur.lastrowid)
        except Exception as e:
            # uq_one_active_session: another clock-in won the race
            if is_duplicate_key(e):
                raise ConflictError("You already have an active session") from e
            raise

        return TimeSession(session_id=session_id, employee_id=employee_id, login_time=login_time)

    def save(self, session: TimeSession, *, expected_version: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_sessions
                SET logout_time=%s, status=%s, total_hours=%s, total_break_hours=%s,
                    net_work_hours=%s, adjusted_hours=%s, lunch_break_deducted=%s,
                    version=version + 1
                WHERE session_id=%s AND version=%s
                """,
                (
                    session.logout_time,
                    session.status.value,
                    session.total_hours,
                    session.total_break_hours,
                    session.net_work_hours,
                    session.adjusted_hours,
                    int(session.lunch_break_deducted),
                    int(session.session_id),
                    int(expected_version),
                ),
            )
            if cur.rowcount == 0:
                logger.warning("Stale write rejected", extra={"session_id": session.session_id})
                return False

            # Breaks are append-only: upsert by position.
            cur.executemany(
                """
                INSERT INTO session_breaks(session_id, seq, start_time, end_time, status, duration)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE end_time=VALUES(end_time), status=VALUES(status), duration=VALUES(duration)
                """,
                [
                    (int(session.session_id), seq, b.start_time, b.end_time, b.status.value, b.duration)
                    for seq, b in enumerate(session.breaks)
                ],
            )
            return True

    def update_notes(self, session_id: int, notes: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE time_sessions SET notes=%s, version=version + 1 WHERE session_id=%s",
                (notes, int(session_id)),
            )
            return cur.rowcount > 0

    def _list(self, clauses: list[str], params: list[object], *, limit: Optional[int] = None) -> list[TimeSession]:
        where = " AND ".join(clauses) if clauses else "1=1"
        sql = f"SELECT {_SESSION_COLUMNS} FROM time_sessions WHERE {where} ORDER BY login_time DESC, session_id DESC"
        if limit is not None:
            sql += " LIMIT %s"
            params = params + [int(limit)]

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return self._hydrate(cur, fetchall(cur))

    @staticmethod
    def _range_clauses(start_date: Optional[date], end_date: Optional[date]) -> tuple[list[str], list[object]]:
        if start_date is None or end_date is None:
            return [], []
        lower, upper = day_bounds(start_date, end_date)
        return ["login_time >= %s", "login_time < %s"], [lower, upper]

    def list_for_employee(
        self,
        employee_id: str,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[TimeSession]:
        clauses, params = self._range_clauses(start_date, end_date)
        return self._list(["employee_id=%s", *clauses], [employee_id, *params])

    def list_all(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 500,
    ) -> Sequence[TimeSession]:
        clauses, params = self._range_clauses(start_date, end_date)
        return self._list(clauses, params, limit=limit)
