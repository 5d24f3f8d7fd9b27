from __future__ import annotations

import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Project paths
# ---------------------------------------------------------------------------

# Root of the project (repo root)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Data directory (survey exports live here)
DATA_DIR = PROJECT_ROOT / "data"

# ---------------------------------------------------------------------------
# App identity
# ---------------------------------------------------------------------------

APP_NAME = "Dashboard de NPS Interno"
APP_VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# Survey export location
#
# The export is the raw "Respostas ao formulário" sheet saved as CSV.
# Override the path/encoding via environment variables if the file lives elsewhere.
# ---------------------------------------------------------------------------

SURVEY_CSV_NAME = "NPS interno (respostas) - Respostas ao formulário 1.csv"

SURVEY_CSV_PATH = Path(
    os.getenv("NPS_CSV_PATH", "").strip() or str(DATA_DIR / SURVEY_CSV_NAME)
)
SURVEY_CSV_ENCODING = os.getenv("NPS_CSV_ENCODING", "utf-8").strip() or "utf-8"

LOG_LEVEL = os.getenv("NPS_LOG_LEVEL", "INFO").strip().upper() or "INFO"

# ---------------------------------------------------------------------------
# Survey schema
#
# Record attribute -> raw header in the export. The headers are kept exactly as
# the form tool writes them, trailing spaces and newlines included.
# ---------------------------------------------------------------------------

FIELD_HEADERS = {
    "name": "Nome\n",
    "satisfaction": "Quão satisfeito você está na função que exerce hoje? ",
    "satisfaction_reason": (
        "Qual o principal motivo da sua satisfação ou insatisfação com a função atual? "
    ),
    "learnings": (
        "O que você mais aprendeu ao desempenhar essa função? "
        "Sente que ainda há algo a mais para aprender? "
    ),
    "desired_role": (
        "Alguma função específica que gostaria de realizar nessa mudança de setor "
        "ou até mesmo dentro do seu próprio setor?"
    ),
    "tenure": "Há quanto tempo você está na função atual? ",
    "change_interest": "Você tem interesse em mudar de setor? ",
    "preferred_sectors": (
        "Se tem interesse em mudar de Setor. Para qual setor você gostaria de ir?"
    ),
}

IDENTITY_FIELD = "name"
SATISFACTION_FIELD = "satisfaction"
CHANGE_INTEREST_FIELD = "change_interest"
PREFERRED_SECTORS_FIELD = "preferred_sectors"

# ---------------------------------------------------------------------------
# Filters / aggregation
# ---------------------------------------------------------------------------

# Filter value meaning "no constraint on this field"
ALL = "all"

# Multi-select answers are exported joined with this literal (no escaping)
SECTOR_DELIMITER = ", "

# Closed ordinal scale offered by the satisfaction filter
SATISFACTION_LEVELS = ("1", "2", "3", "4", "5")
