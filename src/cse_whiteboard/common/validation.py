"""Input validation helpers shared by all action handlers."""

import re
from datetime import date
from typing import Any, Mapping, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from cse_whiteboard.common.exceptions import ValidationError

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
URL_RE = re.compile(r"^https?://[^\s/$.?#][^\s]*$", re.IGNORECASE)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def validate_input(schema: type[SchemaT], data: Mapping[str, Any] | BaseModel) -> SchemaT:
    """Parse ``data`` into ``schema`` or raise ValidationError for the first failure."""
    if isinstance(data, schema):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        message = first.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        raise ValidationError(message, field=field) from exc


def parse_iso_date(value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string into a date."""
    if not isinstance(value, str) or not ISO_DATE_RE.match(value):
        raise ValueError("Must be a date in YYYY-MM-DD format")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValueError("Must be a valid calendar date") from None


def optional_iso_date(value: Any) -> date | None:
    """Empty string and None mean "no date"."""
    if value is None or value == "":
        return None
    if isinstance(value, date):
        return value
    return parse_iso_date(value)


def optional_url(value: Any) -> str | None:
    """Accept an http(s) URL or the empty string; empty is stored as None."""
    if value is None or value == "":
        return None
    if not isinstance(value, str) or not URL_RE.match(value):
        raise ValueError("Must be a valid URL")
    return value
