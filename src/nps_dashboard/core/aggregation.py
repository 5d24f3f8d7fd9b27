"""
Record aggregation engine.

Pure functions of (table, filters) -> derived datasets. Records are either
SurveyRecords or plain string-keyed mappings; a missing field is read as
"no answer" and never raises. Every output keeps first-seen order, so repeated
calls over the same table return identical results.
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Sequence

import logging

from nps_dashboard.config import (
    ALL,
    IDENTITY_FIELD,
    SATISFACTION_FIELD,
    SECTOR_DELIMITER,
)

logger = logging.getLogger(__name__)


class CategoryCount(NamedTuple):
    category: str
    count: int


def field_value(record: Any, field: str) -> Optional[str]:
    """Raw value of `field` on a record, or None when the record has no such field."""
    if isinstance(record, Mapping):
        return record.get(field)
    return getattr(record, field, None)


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------

def _passes(value: Optional[str], wanted: str) -> bool:
    if wanted == ALL:
        return True
    # Missing field only matches an explicit empty-string filter
    return (value if value is not None else "") == wanted


def record_matches(
    record: Any,
    employee: str = ALL,
    satisfaction: str = ALL,
    *,
    identity_field: str = IDENTITY_FIELD,
    satisfaction_field: str = SATISFACTION_FIELD,
) -> bool:
    """
    True iff the record passes both filters.

    A filter set to ALL always passes. Otherwise the raw field value must be
    equal to the filter value, character for character (no trimming).
    """
    return _passes(field_value(record, identity_field), employee) and _passes(
        field_value(record, satisfaction_field), satisfaction
    )


def filter_records(
    table: Iterable[Any],
    employee: str = ALL,
    satisfaction: str = ALL,
    *,
    identity_field: str = IDENTITY_FIELD,
    satisfaction_field: str = SATISFACTION_FIELD,
) -> List[Any]:
    """Records of `table` passing both filters, in input order."""
    filtered = [
        r
        for r in table
        if record_matches(
            r,
            employee,
            satisfaction,
            identity_field=identity_field,
            satisfaction_field=satisfaction_field,
        )
    ]
    logger.debug(
        "Filtered table (employee=%r, satisfaction=%r): %s records",
        employee, satisfaction, len(filtered),
    )
    return filtered


# ---------------------------------------------------------------------------
# Counting
# ---------------------------------------------------------------------------

def _to_pairs(counts: Dict[str, int]) -> List[CategoryCount]:
    return [CategoryCount(category, count) for category, count in counts.items()]


def distinct_value_counts(records: Iterable[Any], field: str) -> List[CategoryCount]:
    """
    One (value, count) pair per distinct populated value of `field`.

    Each record adds one unit to its own value. Absent/empty answers are not
    counted and never produce a blank category.
    """
    counts: Dict[str, int] = {}
    for record in records:
        value = field_value(record, field)
        if not value:
            continue
        counts[value] = counts.get(value, 0) + 1

    logger.debug("Distinct values for %s: %s", field, len(counts))
    return _to_pairs(counts)


def split_labels(value: Optional[str], delimiter: str = SECTOR_DELIMITER) -> List[str]:
    """
    Split a multi-select answer into trimmed labels, dropping empty segments.

    Only the literal delimiter splits: with the default ", ", "Sales,Ops" is a
    single label. A label that itself contains the delimiter cannot be
    represented by the export format and will be split.
    """
    if not value:
        return []
    labels = []
    for part in value.split(delimiter):
        label = part.strip()
        if label:
            labels.append(label)
    return labels


def multi_value_tally(
    records: Iterable[Any],
    field: str,
    delimiter: str = SECTOR_DELIMITER,
) -> List[CategoryCount]:
    """
    (label, count) pairs where a record counts once for every label it lists.

    Counts may therefore add up to more than the number of records.
    """
    counts: Dict[str, int] = {}
    for record in records:
        for label in split_labels(field_value(record, field), delimiter):
            counts[label] = counts.get(label, 0) + 1

    logger.debug("Distinct labels for %s: %s", field, len(counts))
    return _to_pairs(counts)


def distinct_identities(table: Iterable[Any], field: str = IDENTITY_FIELD) -> List[str]:
    """
    Distinct populated identity values, in order of first occurrence.

    Callers pass the unfiltered table so the employee selector keeps all of its
    options whatever the satisfaction filter is set to.
    """
    seen: Dict[str, None] = {}
    for record in table:
        value = field_value(record, field)
        if value and value not in seen:
            seen[value] = None
    return list(seen)


def total_count(counts: Sequence[CategoryCount]) -> int:
    return sum(count for _, count in counts)
