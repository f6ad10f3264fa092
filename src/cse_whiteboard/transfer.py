"""Whole-database export and import as a single JSON document.

Export dumps every table in foreign-key order. Import appends to whatever the
target database already holds: rows get fresh ids and every customer, note
and todo reference is rewritten through the old-to-new id maps built along
the way. JSON snapshots inside audit values are copied as-is.
"""

import json
import logging
from datetime import date, datetime
from typing import Any

from sqlalchemy import Date, DateTime, select
from sqlalchemy.ext.asyncio import AsyncSession

from cse_whiteboard.audit.models import (
    CustomerAuditLogModel,
    CustomerNoteAuditLogModel,
    TodoAuditLogModel,
)
from cse_whiteboard.common.exceptions import ValidationError
from cse_whiteboard.common.models import row_to_dict
from cse_whiteboard.customers.models import CustomerModel
from cse_whiteboard.notes.models import CustomerNoteModel
from cse_whiteboard.todos.models import TodoModel

logger = logging.getLogger(__name__)

# (section, model, {column: (referenced section, required)}), parents first.
SECTIONS = (
    ("customers", CustomerModel, {}),
    ("customer_notes", CustomerNoteModel, {"customer_id": ("customers", True)}),
    ("customer_audit_log", CustomerAuditLogModel, {"customer_id": ("customers", True)}),
    ("customer_note_audit_log", CustomerNoteAuditLogModel, {"note_id": ("customer_notes", True)}),
    ("todos", TodoModel, {
        "customer_id": ("customers", False),
        "note_id": ("customer_notes", False),
    }),
    ("todo_audit_log", TodoAuditLogModel, {"todo_id": ("todos", True)}),
)


def _encode(value: Any) -> str:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def dumps(data: dict[str, list[dict]]) -> str:
    return json.dumps(data, indent=2, default=_encode)


async def export_data(session: AsyncSession) -> dict[str, list[dict]]:
    """Every row of every table, keyed by section name, ordered by id."""
    data = {}
    for name, model, _ in SECTIONS:
        result = await session.execute(select(model).order_by(model.id))
        data[name] = [row_to_dict(row) for row in result.scalars().all()]
    return data


def _decode_row(section: str, model, raw: Any) -> dict[str, Any]:
    if not isinstance(raw, dict):
        raise ValidationError("Rows must be JSON objects", field=section)
    values = {}
    for column in model.__table__.columns:
        key = column.key
        if key == "id" or key not in raw:
            continue
        value = raw[key]
        if isinstance(value, str) and isinstance(column.type, (Date, DateTime)):
            parse = datetime.fromisoformat if isinstance(column.type, DateTime) else date.fromisoformat
            try:
                value = parse(value)
            except ValueError:
                raise ValidationError("Invalid ISO date", field=f"{section}.{key}") from None
        values[key] = value
    return values


def _remap(
    section: str, raw: dict, values: dict[str, Any], refs: dict,
    id_maps: dict[str, dict[int, int]],
) -> bool:
    """Rewrite references in place; False when a required parent was not imported."""
    for column, (target, required) in refs.items():
        old = values.get(column)
        new = id_maps[target].get(old) if old is not None else None
        if new is None and required:
            logger.warning(
                "skipping row with unknown parent",
                extra={"section": section, "row_id": raw.get("id"), column: old},
            )
            return False
        values[column] = new
    return True


async def import_data(session: AsyncSession, data: Any) -> dict[str, int]:
    """Load an exported document; returns the number of rows imported per section."""
    if not isinstance(data, dict):
        raise ValidationError("Export document must be a JSON object")

    id_maps: dict[str, dict[int, int]] = {name: {} for name, _, _ in SECTIONS}
    counts = {}
    for name, model, refs in SECTIONS:
        rows = data.get(name, [])
        if not isinstance(rows, list):
            raise ValidationError("Expected a list of rows", field=name)
        imported = 0
        for raw in rows:
            values = _decode_row(name, model, raw)
            if not _remap(name, raw, values, refs, id_maps):
                continue
            row = model(**values)
            session.add(row)
            await session.flush()
            if raw.get("id") is not None:
                id_maps[name][raw["id"]] = row.id
            imported += 1
        counts[name] = imported

    logger.info("data imported", extra={"rows": counts})
    return counts
