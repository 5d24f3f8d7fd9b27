"""Shared pytest fixtures for nps_dashboard tests."""

import pandas as pd
import pytest

from nps_dashboard.config import FIELD_HEADERS
from nps_dashboard.core.data_loader import SurveyRecord


@pytest.fixture
def scenario_table():
    """Two-respondent table from the dashboard walkthrough (plain mappings)."""
    return [
        {"name": "Ana", "satisfaction": "4", "preferred_sectors": "Sales, Ops"},
        {"name": "Bo", "satisfaction": "4", "preferred_sectors": ""},
    ]


@pytest.fixture
def survey_records():
    """A small typed table covering repeated names, blanks and multi-select answers."""
    return [
        SurveyRecord(
            name="Ana",
            satisfaction="4",
            satisfaction_reason="Boa equipe",
            learnings="Negociação",
            desired_role="",
            tenure="2 anos",
            change_interest="Não",
            preferred_sectors="",
        ),
        SurveyRecord(
            name="Bruno",
            satisfaction="2",
            satisfaction_reason="Pouco reconhecimento",
            learnings="Paciência",
            desired_role="Analista de dados",
            tenure="6 meses",
            change_interest="Sim",
            preferred_sectors="Financeiro, Comercial",
        ),
        SurveyRecord(
            name="Carla",
            satisfaction="4",
            satisfaction_reason="Gosto do que faço",
            learnings="Liderança",
            desired_role="",
            tenure="1 ano",
            change_interest="Talvez",
            preferred_sectors="Comercial",
        ),
        SurveyRecord(
            name="Ana",
            satisfaction="5",
            satisfaction_reason="Mudou a gestão",
            learnings="Processos",
            desired_role="Coordenação",
            tenure="3 anos",
            change_interest="Sim",
            preferred_sectors="Marketing, Financeiro, Comercial",
        ),
        SurveyRecord(
            name="Diego",
            satisfaction="",
            satisfaction_reason="",
            learnings="",
            desired_role="",
            tenure="",
            change_interest="",
            preferred_sectors=None,
        ),
    ]


@pytest.fixture
def write_export(tmp_path):
    """Write rows (attribute-keyed dicts) as a survey export with the raw headers."""

    def _write(rows, headers=None, name="export.csv", encoding="utf-8"):
        headers = headers or FIELD_HEADERS
        frame = pd.DataFrame(
            [{headers[attr]: value for attr, value in row.items()} for row in rows],
            columns=list(headers.values()),
        )
        path = tmp_path / name
        frame.to_csv(path, index=False, encoding=encoding)
        return path

    return _write
