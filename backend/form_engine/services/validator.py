import logging
import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional

from form_engine.core.paths import join_path, resolve
from form_engine.core.state import Group
from form_engine.schemas.field import (
    CHRONOLOGICAL_KINDS,
    PATTERN_KINDS,
    FieldDescriptor,
    FieldKind,
)

logger = logging.getLogger(__name__)

ErrorMap = Dict[str, str]


class ErrorKind(str, Enum):
    REQUIRED_MISSING = 'RequiredMissing'
    PATTERN_MISMATCH = 'PatternMismatch'
    BELOW_MINIMUM = 'BelowMinimum'
    ABOVE_MAXIMUM = 'AboveMaximum'
    UNSUPPORTED_FIELD_KIND = 'UnsupportedFieldKind'
    UPLOAD_FAILED = 'UploadFailed'


UPLOAD_FAILED_MESSAGE = "File upload failed"


class FieldIssue(NamedTuple):
    kind: ErrorKind
    message: str


@dataclass
class TreeValidation:
    is_valid: bool = True
    errors: ErrorMap = field(default_factory=dict)


def is_empty(value: Any) -> bool:
    """``None``, ``""`` and empty lists/tuples are empty. ``0`` and ``False`` are not."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == ''
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


_NUMBER_PREFIX = re.compile(r'\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))')


def parse_number(value: Any) -> Optional[float]:
    """Parse ints, floats and the leading number of a string.

    Strings are read like a browser reads a number input: leading whitespace
    is skipped and parsing stops at the first character that cannot continue
    the number, so ``"15kg"`` is 15 and ``"1_000"`` is 1. ``Infinity`` with an
    optional sign is accepted. Strings with no numeric prefix, bools and NaN
    give ``None``.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        match = _NUMBER_PREFIX.match(value)
        if match is None:
            return None
        number = float(match.group(1).replace('Infinity', 'inf'))
    else:
        return None
    if math.isnan(number):
        return None
    return number


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse dates, datetimes and ISO-8601 strings into naive UTC datetimes.

    ``"2024-01-01"`` becomes midnight of that day and a trailing ``Z`` is read
    as UTC. Unparseable input gives ``None``.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text[-1:] in ('Z', 'z'):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _compare_bound(kind: FieldKind, value: Any, bound: Any) -> Optional[int]:
    """-1, 0 or 1 comparing value to bound, or None when the kind has no ordering or either side does not parse."""
    if kind == FieldKind.NUMBER:
        parse = parse_number
    elif kind in CHRONOLOGICAL_KINDS:
        parse = parse_timestamp
    else:
        return None
    left, right = parse(value), parse(bound)
    if left is None or right is None:
        return None
    return (left > right) - (left < right)


def check_field(descriptor: FieldDescriptor, value: Any) -> Optional[FieldIssue]:
    """Run the checks in order and return the first failure, if any."""
    title = descriptor.label
    custom = descriptor.error_message
    empty = is_empty(value)

    if descriptor.required and empty:
        return FieldIssue(ErrorKind.REQUIRED_MISSING, custom or f"{title} is required")

    if empty:
        return None

    if descriptor.validator_pattern and descriptor.kind in PATTERN_KINDS:
        if re.search(descriptor.validator_pattern, str(value)) is None:
            return FieldIssue(ErrorKind.PATTERN_MISMATCH, custom or f"Invalid {title}")

    chronological = descriptor.kind in CHRONOLOGICAL_KINDS

    if descriptor.min is not None and _compare_bound(descriptor.kind, value, descriptor.min) == -1:
        word = "after" if chronological else "at least"
        return FieldIssue(ErrorKind.BELOW_MINIMUM, custom or f"{title} must be {word} {descriptor.min}")

    if descriptor.max is not None and _compare_bound(descriptor.kind, value, descriptor.max) == 1:
        word = "before" if chronological else "at most"
        return FieldIssue(ErrorKind.ABOVE_MAXIMUM, custom or f"{title} must be {word} {descriptor.max}")

    return None


def validate_field(descriptor: FieldDescriptor, value: Any, parent_path: str = '') -> Optional[str]:
    issue = check_field(descriptor, value)
    if issue is None:
        return None
    logger.debug(f"Field {join_path(parent_path, descriptor.name)} failed {issue.kind.value}")
    return issue.message


def validate_tree(fields: List[FieldDescriptor], state: Group, parent_path: str = '') -> TreeValidation:
    """Validate every leaf below ``fields`` against ``state``.

    Errors are keyed by the leaf's full path; groups only contribute
    through their children.
    """
    result = TreeValidation()
    for descriptor in fields:
        full_path = join_path(parent_path, descriptor.name)
        if descriptor.is_group:
            nested = validate_tree(descriptor.children, state, full_path)
            result.errors.update(nested.errors)
            result.is_valid = result.is_valid and nested.is_valid
            continue
        message = validate_field(descriptor, resolve(state, full_path), parent_path)
        if message:
            result.errors[full_path] = message
            result.is_valid = False
    return result
