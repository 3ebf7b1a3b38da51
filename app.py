"""Streamlit front-end for the NAV performance dashboard."""
from __future__ import annotations

import zipfile

import streamlit as st

from nav_dashboard import (
    DerivePerformanceUseCase,
    PerformanceContext,
    SeriesDerivationEngine,
    WorkbookRecordRepository,
)
from nav_dashboard.domain.results import PerformanceSeries
from nav_dashboard.infrastructure.parsing.utils import compute_file_hash
from nav_dashboard.logging_config import configure_logging
from nav_dashboard.presentation.series_report import (
    drawdown_to_rows,
    equity_to_rows,
    monthly_bars,
    monthly_matrix_frame,
    monthly_to_rows,
    render_csv,
    series_to_frame,
)


configure_logging()
st.set_page_config(page_title="Portfolio", layout="wide")
st.title("Portfolio")


def run_derivation(file_bytes: bytes, file_name: str) -> PerformanceSeries:
    context = PerformanceContext(
        record_repository=WorkbookRecordRepository(file_bytes, filename=file_name),
        engine=SeriesDerivationEngine(),
    )
    return DerivePerformanceUseCase(context).execute()


if "series" not in st.session_state:
    st.session_state["series"] = None
if "file_name" not in st.session_state:
    st.session_state["file_name"] = ""
if "file_hash" not in st.session_state:
    st.session_state["file_hash"] = ""


uploaded = st.file_uploader("Upload NAV file", type=["xlsx", "xls", "csv"])
file_bytes = uploaded.getvalue() if uploaded is not None else b""
file_hash = compute_file_hash(file_bytes) if uploaded is not None else ""
if uploaded is not None and file_hash != st.session_state["file_hash"]:
    try:
        with st.spinner("Deriving series..."):
            st.session_state["series"] = run_derivation(file_bytes, uploaded.name)
        st.session_state["file_name"] = uploaded.name
        st.session_state["file_hash"] = file_hash
    except (OSError, ValueError, zipfile.BadZipFile) as exc:
        st.session_state["series"] = None
        st.session_state["file_name"] = ""
        st.session_state["file_hash"] = ""
        st.error(f"Could not read {uploaded.name}: {exc}")

st.caption(st.session_state["file_name"] or "No file uploaded - upload the Excel with Date and Nav columns")

series: PerformanceSeries | None = st.session_state["series"]
if series is None or series.summary.valid_records == 0:
    st.info("Upload the Excel to view charts.")
else:
    summary = series.summary
    col1, col2, col3 = st.columns(3)
    col1.metric("Valid records", summary.valid_records)
    col2.metric("Dropped records", summary.dropped_records)
    col3.metric("Max drawdown", f"{series.max_drawdown():.2f}%" if not series.is_empty() else "n/a")

    if summary.base_rejected:
        st.warning(f"Base NAV {summary.base_nav} is not positive; equity and drawdown are unavailable.")
    else:
        frame = series_to_frame(series)
        chart_col1, chart_col2 = st.columns(2)
        with chart_col1:
            st.subheader("Equity Curve")
            st.line_chart(frame["equity"], height=300)
        with chart_col2:
            st.subheader("Drawdown")
            st.area_chart(frame["drawdown"], height=300)

    st.subheader("Monthly Returns by Year")
    for year in series.years():
        st.markdown(f"**{year}**")
        st.bar_chart(monthly_bars(series.monthly_returns, year), height=150)

    with st.expander("Monthly return matrix"):
        st.dataframe(monthly_matrix_frame(series.monthly_returns))

    dl1, dl2, dl3 = st.columns(3)
    dl1.download_button(
        "Download equity CSV",
        data=render_csv(equity_to_rows(series.equity)),
        file_name="equity.csv",
        mime="text/csv",
    )
    dl2.download_button(
        "Download drawdown CSV",
        data=render_csv(drawdown_to_rows(series.drawdown)),
        file_name="drawdown.csv",
        mime="text/csv",
    )
    dl3.download_button(
        "Download monthly returns CSV",
        data=render_csv(monthly_to_rows(series.monthly_returns)),
        file_name="monthly_returns.csv",
        mime="text/csv",
    )
