from __future__ import annotations

import uuid
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AdjectivalRating, FormKind, FormStatus, OutputCategory
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import PerformanceForm, RatingLine, SpmsCycle
from .repository import PerformanceFormRepository, SpmsCycleRepository

_FORM_COLUMNS = """
    form_id, kind, owner_id, division, cycle_id, status,
    final_rating, adjectival_rating, supervisor_id, reviewed_by, approved_by,
    review_comments, final_remarks, submitted_at, reviewed_at, finalized_at,
    created_at, updated_at, version
"""


def _to_line(r: Dict[str, Any]) -> RatingLine:
    return RatingLine(
        line_id=str(r["line_id"]),
        category=OutputCategory(r["category"]),
        output_order=int(r["output_order"]),
        output_description=r["output_description"],
        success_indicator=r.get("success_indicator"),
        actual_accomplishment=r.get("actual_accomplishment"),
        quantity=r.get("rating_quantity"),
        quality=r.get("rating_quality"),
        timeliness=r.get("rating_timeliness"),
        remarks=r.get("remarks"),
    )


def _to_form(r: Dict[str, Any], lines: tuple[RatingLine, ...] = ()) -> PerformanceForm:
    rating = r.get("final_rating")
    adjectival = r.get("adjectival_rating")
    return PerformanceForm(
        form_id=str(r["form_id"]),
        kind=FormKind(r["kind"]),
        owner_id=str(r["owner_id"]),
        division=r.get("division"),
        cycle_id=str(r["cycle_id"]),
        status=FormStatus(r["status"]),
        lines=lines,
        final_rating=(float(rating) if rating is not None else None),
        adjectival_rating=(AdjectivalRating(adjectival) if adjectival else None),
        supervisor_id=r.get("supervisor_id"),
        reviewed_by=r.get("reviewed_by"),
        approved_by=r.get("approved_by"),
        review_comments=r.get("review_comments"),
        final_remarks=r.get("final_remarks"),
        submitted_at=r.get("submitted_at"),
        reviewed_at=r.get("reviewed_at"),
        finalized_at=r.get("finalized_at"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        version=int(r.get("version") or 0),
    )


class MySQLPerformanceFormRepository(PerformanceFormRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, form_id: str) -> Optional[PerformanceForm]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_FORM_COLUMNS} FROM performance_forms WHERE form_id=%s", (str(form_id),))
            r = fetchone(cur)
            if not r:
                return None
            cur.execute(
                """
                SELECT line_id, category, output_order, output_description,
                       success_indicator, actual_accomplishment,
                       rating_quantity, rating_quality, rating_timeliness, remarks
                FROM rating_lines
                WHERE form_id=%s
                ORDER BY line_position ASC
                """,
                (str(form_id),),
            )
            lines = tuple(_to_line(x) for x in fetchall(cur))
            return _to_form(r, lines)

    def find_for_cycle(
        self,
        *,
        kind: FormKind,
        cycle_id: str,
        owner_id: Optional[str] = None,
        division: Optional[str] = None,
    ) -> Optional[PerformanceForm]:
        clauses = ["kind=%s", "cycle_id=%s"]
        params: list[object] = [kind.value, str(cycle_id)]
        if owner_id is not None:
            clauses.append("owner_id=%s")
            params.append(str(owner_id))
        if division is not None:
            clauses.append("division=%s")
            params.append(division)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_FORM_COLUMNS} FROM performance_forms WHERE {' AND '.join(clauses)} LIMIT 1",
                tuple(params),
            )
            r = fetchone(cur)
            return _to_form(r) if r else None

    def list_forms(
        self,
        *,
        kind: FormKind,
        owner_id: Optional[str] = None,
        division: Optional[str] = None,
        cycle_id: Optional[str] = None,
        status: Optional[FormStatus] = None,
        limit: int = 200,
    ) -> Sequence[PerformanceForm]:
        clauses = ["kind=%s"]
        params: list[object] = [kind.value]
        if owner_id is not None:
            clauses.append("owner_id=%s")
            params.append(str(owner_id))
        if division is not None:
            clauses.append("division=%s")
            params.append(division)
        if cycle_id is not None:
            clauses.append("cycle_id=%s")
            params.append(str(cycle_id))
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_FORM_COLUMNS}
                FROM performance_forms
                WHERE {' AND '.join(clauses)}
                ORDER BY created_at DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_form(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        kind: FormKind,
        owner_id: str,
        division: Optional[str],
        cycle_id: str,
        supervisor_id: Optional[str] = None,
    ) -> str:
        form_id = str(uuid.uuid4())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO performance_forms(form_id, kind, owner_id, division, cycle_id, status, supervisor_id)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (form_id, kind.value, str(owner_id), division, str(cycle_id), FormStatus.DRAFT.value, supervisor_id),
            )
        return form_id

    def save(self, form: PerformanceForm, *, expected_version: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE performance_forms
                SET status=%s, final_rating=%s, adjectival_rating=%s,
                    reviewed_by=%s, approved_by=%s, review_comments=%s, final_remarks=%s,
                    submitted_at=%s, reviewed_at=%s, finalized_at=%s,
                    updated_at=COALESCE(%s, CURRENT_TIMESTAMP), version=%s
                WHERE form_id=%s AND version=%s
                """,
                (
                    form.status.value,
                    form.final_rating,
                    form.adjectival_rating.value if form.adjectival_rating else None,
                    form.reviewed_by,
                    form.approved_by,
                    form.review_comments,
                    form.final_remarks,
                    form.submitted_at,
                    form.reviewed_at,
                    form.finalized_at,
                    form.updated_at,
                    form.version,
                    form.form_id,
                    int(expected_version),
                ),
            )
            if cur.rowcount == 0:
                return False

            cur.execute("DELETE FROM rating_lines WHERE form_id=%s", (form.form_id,))
            for position, ln in enumerate(form.lines):
                cur.execute(
                    """
                    INSERT INTO rating_lines(
                        line_id, form_id, line_position, category, output_order, output_description,
                        success_indicator, actual_accomplishment,
                        rating_quantity, rating_quality, rating_timeliness, rating_average, remarks
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        ln.line_id,
                        form.form_id,
                        position,
                        ln.category.value,
                        ln.output_order,
                        ln.output_description,
                        ln.success_indicator,
                        ln.actual_accomplishment,
                        ln.quantity,
                        ln.quality,
                        ln.timeliness,
                        ln.average,
                        ln.remarks,
                    ),
                )
            return True


class MySQLSpmsCycleRepository(SpmsCycleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, cycle_id: str) -> Optional[SpmsCycle]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT cycle_id, name, start_date, end_date, is_active FROM spms_cycles WHERE cycle_id=%s",
                (str(cycle_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return SpmsCycle(
                cycle_id=str(r["cycle_id"]),
                name=r["name"],
                start_date=r["start_date"],
                end_date=r["end_date"],
                is_active=bool(r["is_active"]),
            )
