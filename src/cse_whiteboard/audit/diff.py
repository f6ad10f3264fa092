"""Field-level diffing and snapshot serialization for audit rows."""

import json
from datetime import date, datetime
from typing import Any, Iterable, Mapping

CUSTOMER_TRACKED_FIELDS: tuple[str, ...] = (
    "name",
    "last_patch_date",
    "last_patch_version",
    "temperament",
    "topology",
    "dumbledore_stage",
    "patch_frequency",
    "work_load",
    "cloud_manager",
    "product_set",
    "msc_url",
    "runbook_url",
    "snow_url",
)

NOTE_TRACKED_FIELDS: tuple[str, ...] = ("note",)

TODO_TRACKED_FIELDS: tuple[str, ...] = (
    "title",
    "description",
    "completed",
    "priority",
    "due_date",
    "customer_id",
    "note_id",
)


def normalize_value(value: Any) -> str | None:
    """Canonical string form used for both comparison and storage.

    Dates and datetimes collapse to ``YYYY-MM-DD`` so a date column read back
    as a datetime does not register as a change.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _json_default(value: Any) -> str:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def snapshot_json(state: Mapping[str, Any]) -> str:
    """JSON-serialize a whole-object snapshot."""
    return json.dumps(dict(state), default=_json_default, sort_keys=True)


def diff_fields(
    old: Mapping[str, Any],
    new: Mapping[str, Any],
    tracked: Iterable[str],
) -> list[tuple[str, str | None, str | None]]:
    """Return ``(field, old, new)`` for each tracked field present in ``new`` that changed."""
    changes = []
    for field in tracked:
        if field not in new:
            continue
        old_value = normalize_value(old.get(field))
        new_value = normalize_value(new.get(field))
        if old_value != new_value:
            changes.append((field, old_value, new_value))
    return changes
