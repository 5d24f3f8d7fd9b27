from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import streamlit as st

from nps_dashboard.config import (
    ALL,
    APP_NAME,
    APP_VERSION,
    LOG_LEVEL,
    SATISFACTION_LEVELS,
    SURVEY_CSV_PATH,
)
from nps_dashboard.core.aggregation import distinct_identities
from nps_dashboard.core.data_loader import (
    DataLoaderError,
    SurveyRecord,
    timed_load_survey_table,
)
from nps_dashboard.core.views import (
    DashboardFilters,
    DashboardViews,
    FeedbackEntry,
    build_dashboard_views,
    change_interest_frame,
    satisfaction_badge,
    satisfaction_chart_frame,
    satisfaction_label,
    sector_chart_frame,
)

logger = logging.getLogger(__name__)


@st.cache_data(show_spinner=False)
def _load_table(path: str) -> List[SurveyRecord]:
    records, elapsed = timed_load_survey_table(path)
    logger.info("Survey export loaded in %0.3fs", elapsed)
    return records


def _render_filters(employees: List[str], levels: Tuple[str, ...]) -> DashboardFilters:
    col1, col2 = st.columns(2)

    with col1:
        employee = st.selectbox(
            "Colaborador",
            options=[ALL] + employees,
            format_func=lambda v: "Todos os colaboradores" if v == ALL else v,
            key="filter_employee",
        )

    with col2:
        satisfaction = st.selectbox(
            "Nível de satisfação",
            options=[ALL] + list(levels),
            format_func=lambda v: "Todos os níveis" if v == ALL else satisfaction_label(v),
            key="filter_satisfaction",
        )

    return DashboardFilters(employee=employee, satisfaction=satisfaction)


def _render_charts(views: DashboardViews) -> None:
    col1, col2 = st.columns(2)

    with col1:
        st.subheader("Distribuição de Satisfação")
        frame = satisfaction_chart_frame(views.satisfaction_distribution)
        if frame.empty:
            st.info("Sem respostas para os filtros selecionados.")
        else:
            st.bar_chart(frame, x="satisfaction", y="count")

    with col2:
        st.subheader("Interesse em Mudança de Setor")
        frame = change_interest_frame(views.change_interest_distribution)
        if frame.empty:
            st.info("Sem respostas para os filtros selecionados.")
        else:
            st.bar_chart(frame, x="name", y="value")
            st.dataframe(
                frame.assign(percent=frame["percent"].map(lambda p: f"{p}%")),
                hide_index=True,
                use_container_width=True,
            )

    st.subheader("Setores Preferidos para Mudança")
    frame = sector_chart_frame(views.preferred_sector_tally)
    if frame.empty:
        st.info("Nenhum setor preferido informado.")
    else:
        st.bar_chart(frame, x="sector", y="count")


def _render_feedback_entry(entry: FeedbackEntry) -> None:
    with st.container(border=True):
        head, badge = st.columns([3, 1])
        head.markdown(f"**{entry.name}**")
        badge.caption(satisfaction_badge(entry.satisfaction))

        st.markdown("*Motivo da Satisfação/Insatisfação:*")
        st.write(entry.satisfaction_reason)

        st.markdown("*Aprendizados na Função:*")
        st.write(entry.learnings)

        if entry.has_desired_role:
            st.markdown("*Interesses de Mudança/Desenvolvimento:*")
            st.write(entry.desired_role)

        st.caption(
            f"Tempo na função: {entry.tenure}  ·  Interesse em mudança: {entry.change_interest}"
        )


def _render_feedback(views: DashboardViews) -> None:
    st.subheader("Feedbacks Detalhados")
    if views.is_empty:
        st.info("Nenhum feedback para os filtros selecionados.")
        return

    st.caption(f"{views.respondent_count} respostas")
    for entry in views.feedback:
        _render_feedback_entry(entry)


def run_app(csv_path: Optional[str] = None) -> None:
    logging.basicConfig(level=LOG_LEVEL)

    st.set_page_config(page_title=APP_NAME, page_icon="📊", layout="wide")
    st.title(APP_NAME)
    st.caption(f"Versão {APP_VERSION}")

    path = str(csv_path or SURVEY_CSV_PATH)
    try:
        with st.spinner("Carregando dados..."):
            table = _load_table(path)
    except DataLoaderError as exc:
        logger.exception("Could not load survey export %s", path)
        st.error(f"Erro ao carregar os dados: {exc}")
        return

    # Employee options always come from the unfiltered table
    options = distinct_identities(table)
    filters = _render_filters(options, levels=SATISFACTION_LEVELS)

    views = build_dashboard_views(table, filters)
    _render_charts(views)
    _render_feedback(views)
