from __future__ import annotations

import uuid
from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import format_clock
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import DTRLog
from .repository import DTRLogRepository

_COLUMNS = """
    log_id, employee_id, log_date,
    am_arrival, am_departure, pm_arrival, pm_departure,
    remarks, encoded_by, created_at, updated_at
"""


def _to_log(r: Dict[str, Any]) -> DTRLog:
    return DTRLog(
        log_id=str(r["log_id"]),
        employee_id=str(r["employee_id"]),
        log_date=r["log_date"],
        am_in=format_clock(r.get("am_arrival")),
        am_out=format_clock(r.get("am_departure")),
        pm_in=format_clock(r.get("pm_arrival")),
        pm_out=format_clock(r.get("pm_departure")),
        remarks=r.get("remarks"),
        encoded_by=(str(r["encoded_by"]) if r.get("encoded_by") else None),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLDTRLogRepository(DTRLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, log_id: str) -> Optional[DTRLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM dtr_logs WHERE log_id=%s", (str(log_id),))
            r = fetchone(cur)
            return _to_log(r) if r else None

    def get_for_employee_and_date(self, employee_id: str, log_date: date) -> Optional[DTRLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM dtr_logs WHERE employee_id=%s AND log_date=%s",
                (str(employee_id), log_date),
            )
            r = fetchone(cur)
            return _to_log(r) if r else None

    def list_for_employee_between(self, employee_id: str, *, start: date, end: date) -> Sequence[DTRLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM dtr_logs
                WHERE employee_id=%s AND log_date >= %s AND log_date < %s
                ORDER BY log_date ASC
                """,
                (str(employee_id), start, end),
            )
            return [_to_log(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        employee_id: str,
        log_date: date,
        am_in: Optional[str],
        am_out: Optional[str],
        pm_in: Optional[str],
        pm_out: Optional[str],
        remarks: Optional[str],
        encoded_by: str,
    ) -> str:
        log_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO dtr_logs(
                    log_id, employee_id, log_date,
                    am_arrival, am_departure, pm_arrival, pm_departure,
                    remarks, encoded_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (log_id, str(employee_id), log_date, am_in, am_out, pm_in, pm_out, remarks, str(encoded_by)),
            )
        return log_id

    def update(
        self,
        *,
        log_id: str,
        am_in: Optional[str],
        am_out: Optional[str],
        pm_in: Optional[str],
        pm_out: Optional[str],
        remarks: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE dtr_logs
                SET am_arrival=%s, am_departure=%s, pm_arrival=%s, pm_departure=%s,
                    remarks=%s, updated_at=CURRENT_TIMESTAMP
                WHERE log_id=%s
                """,
                (am_in, am_out, pm_in, pm_out, remarks, str(log_id)),
            )
            return cur.rowcount > 0

    def delete(self, log_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM dtr_logs WHERE log_id=%s", (str(log_id),))
            return cur.rowcount > 0
