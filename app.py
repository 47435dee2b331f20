# app.py — USD → CAD dashboard (dollar-price API + plotly line chart)
import streamlit as st

from usdcad import charts
from usdcad.api.prices import PriceClient
from usdcad.config import load_settings
from usdcad.logging import configure_logging, get_logger
from usdcad.utils import ChartSeries, format_rate, format_timestamp
from usdcad.view import ChartView

settings = load_settings(st.secrets)
configure_logging(level=settings.log_level, environment=settings.environment)
log = get_logger("app")

# ================ Page config & header ================
st.set_page_config(page_title="USD to CAD", layout="wide")
st.title("💵 USD to CAD Exchange Rate")
st.caption("Last 7 days of exchange rates")

# =========================================================
# Kill switch (flip FETCH_ENABLED to "0" in Streamlit Cloud)
# =========================================================
if not settings.fetch_enabled:
    st.warning("⏸️ Data fetching is disabled by server setting.")
    st.stop()

# ========================= One view per session =========================
if "chart_view" not in st.session_state:
    view = ChartView(PriceClient(settings.client_config()))
    view.activate()
    st.session_state["chart_view"] = view
    log.info("session.view_created", base_url=settings.api_base_url)
view: ChartView = st.session_state["chart_view"]

with st.sidebar:
    st.header("Controls")
    if st.button("🔄 Refresh data"):
        view.retry()
    st.caption(f"API: {settings.api_base_url}")

if view.loading:
    with st.spinner("Loading data..."):
        view.wait(timeout=settings.request_timeout + 5)

proj = view.projection(label_format=settings.label_format)

# ====================== Error + retry ======================
if proj.error:
    st.error(proj.error)
    if st.button("Retry"):
        view.retry()
        st.rerun()
    st.stop()

if proj.loading:
    st.info("Still loading… refresh the page in a moment.")
    st.stop()

# ====================== Chart ======================
st.plotly_chart(charts.rate_line(ChartSeries(proj.labels, proj.series)), use_container_width=True)

# ====================== Stats ======================
if view.prices:
    c1, c2, c3 = st.columns(3)
    c1.metric("Current Rate", format_rate(proj.stats.current_rate))
    c2.metric("7-Day Average", format_rate(proj.stats.average_rate))
    c3.metric("Last Updated", format_timestamp(proj.stats.last_updated))
else:
    st.info("No prices returned by the API yet.")
