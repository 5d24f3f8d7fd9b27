from __future__ import annotations

import io
import time
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import logging

import pandas as pd

from nps_dashboard.config import FIELD_HEADERS, SURVEY_CSV_ENCODING, SURVEY_CSV_PATH

logger = logging.getLogger(__name__)


class DataLoaderError(Exception):
    """Raised when the survey export cannot be read or does not match the schema."""


@dataclass(frozen=True)
class SurveyRecord:
    """
    One respondent's answers, keyed by schema attribute instead of raw header.

    Every field is optional: None means the column was absent from the export,
    an empty string means the respondent left the question blank. Values are
    kept exactly as exported (no trimming) so filters can match them verbatim.
    """
    name: Optional[str] = None
    satisfaction: Optional[str] = None
    satisfaction_reason: Optional[str] = None
    learnings: Optional[str] = None
    desired_role: Optional[str] = None
    tenure: Optional[str] = None
    change_interest: Optional[str] = None
    preferred_sectors: Optional[str] = None

    def get(self, field: str, default: Optional[str] = None) -> Optional[str]:
        value = getattr(self, field, None)
        return default if value is None else value


SCHEMA_FIELDS: Tuple[str, ...] = tuple(f.name for f in fields(SurveyRecord))


# ---------------------------------------------------------------------------
# Header resolution
# ---------------------------------------------------------------------------

def _normalize_header(header: Any) -> str:
    # Collapses the line breaks / double spaces the form tool leaves in headers
    return " ".join(str(header).split()).casefold()


def resolve_field_columns(
    columns: List[str],
    field_headers: Optional[Dict[str, str]] = None,
) -> Dict[str, Optional[str]]:
    """
    Map each schema attribute to the column of the export that holds it.

    Exact header match first; if the export was re-saved and lost the trailing
    spaces/newlines, fall back to a whitespace- and case-insensitive match.
    Attributes with no matching column map to None.
    """
    headers = field_headers or FIELD_HEADERS
    normalized = {}
    for col in columns:
        normalized.setdefault(_normalize_header(col), col)

    resolved: Dict[str, Optional[str]] = {}
    for attr in SCHEMA_FIELDS:
        expected = headers.get(attr)
        if expected is None:
            resolved[attr] = None
            continue

        if expected in columns:
            resolved[attr] = expected
            continue

        fallback = normalized.get(_normalize_header(expected))
        if fallback is not None:
            logger.warning(
                "Column for %s matched loosely: expected %r, using %r.", attr, expected, fallback
            )
        else:
            logger.warning("Survey export has no column for %s (expected %r).", attr, expected)
        resolved[attr] = fallback

    return resolved


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def _cell(value: Any) -> Optional[str]:
    if value is None:
        return None
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    return str(value)


def records_from_frame(
    df: pd.DataFrame,
    field_headers: Optional[Dict[str, str]] = None,
) -> List[SurveyRecord]:
    """
    Convert a raw header-keyed frame (all columns as str) into SurveyRecords.

    Rows where every column is blank are dropped.
    """
    columns = [str(c) for c in df.columns]
    resolved = resolve_field_columns(columns, field_headers)

    if df.columns.size and all(col is None for col in resolved.values()):
        raise DataLoaderError(
            f"Survey export does not contain any of the expected columns. Found: {columns}"
        )

    records: List[SurveyRecord] = []
    skipped = 0
    for _, row in df.iterrows():
        raw = [_cell(v) for v in row.tolist()]
        if all(not v for v in raw):
            skipped += 1
            continue

        values = {
            attr: (_cell(row[col]) if col is not None else None)
            for attr, col in resolved.items()
        }
        records.append(SurveyRecord(**values))

    if skipped:
        logger.info("Skipped %s empty rows in survey export.", skipped)
    return records


def parse_survey_csv(
    text: str,
    field_headers: Optional[Dict[str, str]] = None,
) -> List[SurveyRecord]:
    """
    Parse the CSV text of a survey export (header row + one row per respondent).

    Everything is read as text: "4" stays "4", and blank cells stay "" instead
    of becoming NaN. Quoted cells may span several lines.
    """
    if not text or not text.strip():
        return []

    try:
        df = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise DataLoaderError(f"Could not parse survey export: {exc}") from exc

    return records_from_frame(df, field_headers)


def load_survey_table(
    path: Optional[Path | str] = None,
    encoding: Optional[str] = None,
    field_headers: Optional[Dict[str, str]] = None,
) -> List[SurveyRecord]:
    """
    Load the survey export from disk.

    Defaults to SURVEY_CSV_PATH / SURVEY_CSV_ENCODING from config (both
    overridable via environment variables).
    """
    csv_path = Path(path) if path is not None else SURVEY_CSV_PATH
    enc = encoding or SURVEY_CSV_ENCODING

    logger.info("Loading survey export: %s", csv_path)
    try:
        text = csv_path.read_text(encoding=enc)
    except FileNotFoundError as exc:
        raise DataLoaderError(f"Survey export not found: {csv_path}") from exc
    except UnicodeDecodeError as exc:
        raise DataLoaderError(f"Survey export is not valid {enc}: {csv_path}") from exc
    except OSError as exc:
        raise DataLoaderError(f"Could not read survey export {csv_path}: {exc}") from exc

    records = parse_survey_csv(text, field_headers)
    logger.info("Loaded %s survey responses from %s", len(records), csv_path.name)
    return records


def timed_load_survey_table(
    path: Optional[Path | str] = None,
    encoding: Optional[str] = None,
) -> Tuple[List[SurveyRecord], float]:
    """
    Convenience helper for UI timing logs.
    """
    t0 = time.perf_counter()
    records = load_survey_table(path, encoding=encoding)
    return records, (time.perf_counter() - t0)
