from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Sequence, Tuple

import logging

import pandas as pd

from nps_dashboard.config import (
    ALL,
    CHANGE_INTEREST_FIELD,
    IDENTITY_FIELD,
    PREFERRED_SECTORS_FIELD,
    SATISFACTION_FIELD,
    SATISFACTION_LEVELS,
    SECTOR_DELIMITER,
)
from nps_dashboard.core.aggregation import (
    CategoryCount,
    distinct_identities,
    distinct_value_counts,
    field_value,
    filter_records,
    multi_value_tally,
    total_count,
)

logger = logging.getLogger(__name__)


@dataclass
class DashboardFilters:
    """
    Current selector state. Each value is ALL or a raw field value to match.
    """
    employee: str = ALL
    satisfaction: str = ALL


@dataclass
class FeedbackEntry:
    """
    Free-text answers of one respondent, passed through unmodified for the
    detailed feedback panel.
    """
    name: str
    satisfaction: str
    satisfaction_reason: str
    learnings: str
    desired_role: str
    tenure: str
    change_interest: str

    @property
    def has_desired_role(self) -> bool:
        # The panel only shows this block when the respondent answered it
        return bool(self.desired_role)


@dataclass
class DashboardViews:
    """
    Everything the presentation layer needs for one filter state.

    employee_options is computed from the unfiltered table; all other views
    are computed from `records` (the filtered table).
    """
    filters: DashboardFilters
    records: List[Any]

    satisfaction_distribution: List[CategoryCount]
    change_interest_distribution: List[CategoryCount]
    preferred_sector_tally: List[CategoryCount]

    employee_options: List[str]
    satisfaction_options: Tuple[str, ...] = SATISFACTION_LEVELS

    feedback: List[FeedbackEntry] = field(default_factory=list)

    @property
    def respondent_count(self) -> int:
        return len(self.records)

    @property
    def is_empty(self) -> bool:
        return not self.records


def _text(record: Any, attr: str) -> str:
    value = field_value(record, attr)
    return "" if value is None else value


def build_feedback_entry(record: Any) -> FeedbackEntry:
    return FeedbackEntry(
        name=_text(record, "name"),
        satisfaction=_text(record, "satisfaction"),
        satisfaction_reason=_text(record, "satisfaction_reason"),
        learnings=_text(record, "learnings"),
        desired_role=_text(record, "desired_role"),
        tenure=_text(record, "tenure"),
        change_interest=_text(record, "change_interest"),
    )


def build_dashboard_views(
    table: Sequence[Any],
    filters: Optional[DashboardFilters] = None,
    delimiter: str = SECTOR_DELIMITER,
) -> DashboardViews:
    """
    Build every derived dataset for the dashboard from the loaded table.

    This function:
      - Filters the table by employee and satisfaction
      - Counts satisfaction levels and interest-in-change answers
      - Tallies preferred sectors (one record may count for several sectors)
      - Lists employee options from the *unfiltered* table
      - Collects the free-text feedback of the filtered records

    An empty filter result is valid: every dataset is then empty.
    """
    filters = filters or DashboardFilters()

    records = filter_records(table, filters.employee, filters.satisfaction)

    views = DashboardViews(
        filters=filters,
        records=records,
        satisfaction_distribution=distinct_value_counts(records, SATISFACTION_FIELD),
        change_interest_distribution=distinct_value_counts(records, CHANGE_INTEREST_FIELD),
        preferred_sector_tally=multi_value_tally(records, PREFERRED_SECTORS_FIELD, delimiter),
        employee_options=distinct_identities(table, IDENTITY_FIELD),
        feedback=[build_feedback_entry(r) for r in records],
    )

    logger.info(
        "Dashboard views for %s: %s of %s records, %s sector mentions",
        filters, views.respondent_count, len(table), total_count(views.preferred_sector_tally),
    )
    return views


# ---------------------------------------------------------------------------
# Chart-ready frames
# ---------------------------------------------------------------------------

def satisfaction_label(level: str) -> str:
    return f"Nível {level}"


def satisfaction_badge(value: str) -> str:
    return f"Satisfação: {value}/5"


def satisfaction_chart_frame(counts: Iterable[CategoryCount]) -> pd.DataFrame:
    rows = [{"satisfaction": satisfaction_label(level), "count": count} for level, count in counts]
    return pd.DataFrame(rows, columns=["satisfaction", "count"])


def change_interest_frame(counts: Iterable[CategoryCount]) -> pd.DataFrame:
    """
    Pie-style shares: name, value and the rounded percentage of the total.
    """
    counts = list(counts)
    total = total_count(counts)
    rows = []
    for name, count in counts:
        # Half-up, as shown on the chart labels
        percent = int(100 * count / total + 0.5) if total else 0
        rows.append({"name": name, "value": count, "percent": percent})
    return pd.DataFrame(rows, columns=["name", "value", "percent"])


def sector_chart_frame(counts: Iterable[CategoryCount]) -> pd.DataFrame:
    rows = [{"sector": sector, "count": count} for sector, count in counts]
    return pd.DataFrame(rows, columns=["sector", "count"])
