"""
Per-field validation policy for event payloads.

Each field is described by a FieldRule; check_field() applies the
normalization primitives and raises a ValidationError naming the field and
the kind of violation. validate_payload() walks the rules in declaration
order and stops at the first violation, so nothing from a rejected payload
is ever persisted.

On update, title and date may be omitted but not set to null: an event
without a title or a date is never valid.
"""

from dataclasses import dataclass
from typing import Any, Optional

from events_api.core.errors import ValidationError
from events_api.core.validation import (
    ABSENT,
    TYPE_ERROR,
    MAX_TITLE,
    MAX_LOCATION,
    MAX_DESCRIPTION,
    is_valid_datetime,
    normalize_string,
    validate_max_len,
)

DATE_FORMAT_HINT = "e.g. 2026-01-27 or 2026-01-27T10:00:00Z"


@dataclass(frozen=True)
class FieldRule:
    name: str
    required: bool = False
    nullable: bool = True
    max_len: Optional[int] = None
    iso_datetime: bool = False

    @property
    def allows_empty(self) -> bool:
        return self.nullable and not self.required


CREATE_RULES = (
    FieldRule("title", required=True, nullable=False, max_len=MAX_TITLE),
    FieldRule("date", required=True, nullable=False, iso_datetime=True),
    FieldRule("location", max_len=MAX_LOCATION),
    FieldRule("description", max_len=MAX_DESCRIPTION),
)

UPDATE_RULES = (
    FieldRule("title", nullable=False, max_len=MAX_TITLE),
    FieldRule("date", nullable=False, iso_datetime=True),
    FieldRule("location", max_len=MAX_LOCATION),
    FieldRule("description", max_len=MAX_DESCRIPTION),
)


def check_field(rule: FieldRule, raw: Any = ABSENT):
    """
    Validate one raw value against its rule.

    Returns ABSENT (leave untouched), None (clear) or the trimmed string.
    """
    name = rule.name
    value = normalize_string(raw)

    if value is ABSENT or value is None:
        if rule.required:
            raise ValidationError(name, f'Field "{name}" is required', code="required")
        if value is None and not rule.nullable:
            raise ValidationError(name, f'Field "{name}" cannot be null', code="not_nullable")
        return value

    if value is TYPE_ERROR:
        expected = "a string or null" if rule.nullable else "a string"
        raise ValidationError(name, f'Field "{name}" must be {expected}', code="type")

    if not value and not rule.allows_empty:
        raise ValidationError(name, f'Field "{name}" cannot be empty', code="empty")

    if rule.max_len is not None and not validate_max_len(value, rule.max_len):
        raise ValidationError(
            name, f'Field "{name}" exceeds max length', code="max_length", maxLen=rule.max_len
        )

    if rule.iso_datetime and not is_valid_datetime(value):
        raise ValidationError(
            name,
            f'Field "{name}" must be a valid ISO 8601 date ({DATE_FORMAT_HINT})',
            code="datetime",
        )

    return value


def validate_payload(rules: tuple[FieldRule, ...], payload: dict[str, Any]) -> dict[str, Optional[str]]:
    """Return the normalized values of every field present in the payload."""
    values: dict[str, Optional[str]] = {}
    for rule in rules:
        value = check_field(rule, payload.get(rule.name, ABSENT))
        if value is not ABSENT:
            values[rule.name] = value
    return values
