"""Tests for reading the survey export into SurveyRecords."""

import logging

import pandas as pd
import pytest

from nps_dashboard.config import FIELD_HEADERS
from nps_dashboard.core.data_loader import (
    SCHEMA_FIELDS,
    DataLoaderError,
    SurveyRecord,
    load_survey_table,
    parse_survey_csv,
    records_from_frame,
    resolve_field_columns,
    timed_load_survey_table,
)


class TestResolveFieldColumns:
    """Mapping raw headers to record attributes."""

    def test_exact_headers(self):
        resolved = resolve_field_columns(list(FIELD_HEADERS.values()))
        assert resolved == FIELD_HEADERS

    def test_loose_match_when_whitespace_lost(self, caplog):
        columns = ["Nome", "Quão satisfeito você está na função que exerce hoje?"]
        with caplog.at_level(logging.WARNING):
            resolved = resolve_field_columns(columns)
        assert resolved["name"] == "Nome"
        assert resolved["satisfaction"] == columns[1]
        assert "matched loosely" in caplog.text

    def test_missing_columns_map_to_none(self, caplog):
        with caplog.at_level(logging.WARNING):
            resolved = resolve_field_columns(["Nome\n"])
        assert resolved["name"] == "Nome\n"
        assert resolved["preferred_sectors"] is None
        assert set(resolved) == set(SCHEMA_FIELDS)


class TestRecordsFromFrame:
    """Typed records from a raw frame."""

    def test_values_kept_verbatim(self):
        df = pd.DataFrame([{"Nome\n": " Ana ", FIELD_HEADERS["satisfaction"]: "4"}])
        records = records_from_frame(df)
        assert records == [SurveyRecord(name=" Ana ", satisfaction="4")]

    def test_blank_rows_dropped(self):
        df = pd.DataFrame([{"Nome\n": "", FIELD_HEADERS["satisfaction"]: ""}])
        assert records_from_frame(df) == []

    def test_unknown_schema_raises(self):
        df = pd.DataFrame([{"foo": "1", "bar": "2"}])
        with pytest.raises(DataLoaderError):
            records_from_frame(df)

    def test_records_are_immutable(self):
        record = SurveyRecord(name="Ana")
        with pytest.raises(AttributeError):
            record.name = "Bo"


class TestParseSurveyCsv:
    """Parsing CSV text."""

    def test_empty_text(self):
        assert parse_survey_csv("") == []
        assert parse_survey_csv("   \n") == []

    def test_header_only(self):
        text = ",".join(f'"{h}"' for h in FIELD_HEADERS.values()) + "\n"
        assert parse_survey_csv(text) == []

    def test_values_are_text_and_blanks_are_empty(self):
        text = '"Nome\n","Quão satisfeito você está na função que exerce hoje? "\nAna,4\nBo,\n'
        records = parse_survey_csv(text)
        assert [r.name for r in records] == ["Ana", "Bo"]
        assert [r.satisfaction for r in records] == ["4", ""]
        assert records[0].preferred_sectors is None

    def test_empty_lines_ignored(self):
        text = '"Nome\n"\nAna\n\nBo\n\n'
        assert [r.name for r in parse_survey_csv(text)] == ["Ana", "Bo"]


class TestLoadSurveyTable:
    """Loading the export from disk."""

    def test_round_trip_through_file(self, write_export):
        path = write_export(
            [
                {
                    "name": "Ana",
                    "satisfaction": "4",
                    "learnings": "Negociação,\ncom clientes",
                    "change_interest": "Sim",
                    "preferred_sectors": "Financeiro, Comercial",
                },
                {"name": "Bo", "satisfaction": "2"},
            ]
        )
        records = load_survey_table(path)
        assert len(records) == 2
        assert records[0].learnings == "Negociação,\ncom clientes"
        assert records[0].preferred_sectors == "Financeiro, Comercial"
        assert records[1].change_interest == ""

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataLoaderError, match="not found"):
            load_survey_table(tmp_path / "missing.csv")

    def test_wrong_encoding(self, write_export):
        path = write_export([{"name": "Ana", "satisfaction": "4"}], encoding="utf-16")
        with pytest.raises(DataLoaderError):
            load_survey_table(path, encoding="utf-8")

    def test_timed_load(self, write_export):
        path = write_export([{"name": "Ana", "satisfaction": "4"}])
        records, elapsed = timed_load_survey_table(path)
        assert [r.name for r in records] == ["Ana"]
        assert elapsed >= 0
