import streamlit as st
import pandas as pd
import plotly.express as px
from datetime import date
from dotenv import load_dotenv

load_dotenv()  # this loads variables from .env into os.environ

from residency_reporting.classifier import (  # noqa: E402
    VIEW_ALL,
    VIEW_EXPIRED,
    VIEW_EXPIRING,
    get_severity_tier,
    search_employees,
    select_view,
    summarize,
)
from residency_reporting.exporter import build_export_dataframe, export_filename, export_to_excel_bytes  # noqa: E402
from residency_reporting.models import ReportType, SeverityTier  # noqa: E402
from residency_reporting.normalizer import format_display_name  # noqa: E402
from residency_reporting.orchestrator import build_report  # noqa: E402
from residency_reporting.schema import SchemaMismatchError  # noqa: E402
from residency_reporting.source_fetcher import fetch_source_text, load_employees  # noqa: E402

TIER_COLORS = {
    SeverityTier.EXPIRED.value: "#EF9A9A",
    SeverityTier.URGENT.value: "#FFB74D",
    SeverityTier.WARNING.value: "#FFF176",
    SeverityTier.NORMAL.value: "#A5D6A7",
}

VIEW_LABELS = {
    VIEW_ALL: "All Employees",
    VIEW_EXPIRING: "Expiring in 30 Days",
    VIEW_EXPIRED: "Expired",
}

EMPTY_REPORT_MESSAGES = {
    ReportType.EXPIRED: "✅ Great! No expired residencies found",
    ReportType.URGENT: "✅ Excellent! No urgent cases found",
    ReportType.BOTH: "✅ Perfect! All residencies are valid",
}


# --- Data Loading ---
@st.cache_data(ttl=600)
def get_source_text(run_date: date):
    """Download the sheet once per day (and at most every 10 minutes)."""
    success, text, error = fetch_source_text()
    return text if success else None, error


st.set_page_config(
    page_title="Staff Residency Monitoring System",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Hide only deploy button and menu, keep sidebar toggle
st.markdown("""
<style>
    .stDeployButton {display: none !important;}
    #MainMenu {visibility: hidden !important;}
    footer {visibility: hidden !important;}
</style>
""", unsafe_allow_html=True)

st.title("Staff Residency Monitoring System")
st.caption("Smart system for monitoring staff residency expiration dates")

today = date.today()
source_text, error_message = get_source_text(today)
# Day counts are always recalculated against today, never cached
try:
    employees = load_employees(today=today, source_text=source_text) if source_text else []
except SchemaMismatchError as e:
    employees = []
    error_message = f"Source sheet layout changed: {e}"

# --- Sidebar ---
st.sidebar.header("Controls")

if st.sidebar.button("🔄 Refresh Data", help="Download the latest sheet"):
    get_source_text.clear()
    st.rerun()

if error_message:
    st.sidebar.error("❌ Source Connection Issue")
    st.sidebar.error(f"Error: {error_message}")

summary = summarize(employees)
view_counts = {VIEW_ALL: summary.total, VIEW_EXPIRING: summary.expiring, VIEW_EXPIRED: summary.expired}

view = st.sidebar.radio(
    "View",
    [VIEW_ALL, VIEW_EXPIRING, VIEW_EXPIRED],
    format_func=lambda v: f"{VIEW_LABELS[v]} ({view_counts[v]})",
)

search_term = st.sidebar.text_input("🔍 Search...", value="")

if not employees:
    if error_message:
        st.error(f"❌ {error_message}")
    else:
        st.info("📊 No employee data available.")
    st.stop()

# --- Summary Metrics ---
col1, col2, col3 = st.columns(3)
col1.metric("Total Employees", summary.total)
col2.metric("Expiring in 30 Days", summary.expiring)
col3.metric("Expired", summary.expired)

# --- Records ---
if search_term.strip():
    employees_to_show = search_employees(employees, search_term)
    st.subheader(f"Search results for '{search_term.strip()}' ({len(employees_to_show)})")
else:
    employees_to_show = select_view(employees, view)
    st.subheader(f"{VIEW_LABELS[view]} ({len(employees_to_show)})")

if employees_to_show:
    display_df = build_export_dataframe(employees_to_show)[[
        "Staff No.", "Employee Name", "Job", "Nationality", "Card Type",
        "Card Number", "Card Expiry Date", "Days Remaining", "Status"
    ]]

    def _row_style(row):
        color = TIER_COLORS.get(row["Status"], "")
        return [f"background-color: {color}" for _ in row]

    st.dataframe(display_df.style.apply(_row_style, axis=1), use_container_width=True, hide_index=True)

    st.download_button(
        "📥 Export",
        data=export_to_excel_bytes(employees_to_show),
        file_name=export_filename(today),
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )

    # --- Detail View ---
    selected_staff_no = st.selectbox(
        "Employee details",
        [""] + [employee.staff_no for employee in employees_to_show],
        format_func=lambda s: "Select an employee..." if not s else s,
    )
    selected = next((e for e in employees_to_show if e.staff_no == selected_staff_no), None)
    if selected:
        tier = get_severity_tier(selected.days_until_expiry)
        st.markdown(f"**{format_display_name(selected.name)}** ({selected.staff_no}) - {tier.value}")
        detail_col1, detail_col2 = st.columns(2)
        detail_col1.write(f"Job: {format_display_name(selected.job)}")
        detail_col1.write(f"Nationality: {format_display_name(selected.nationality)}")
        detail_col1.write(f"Card Type: {format_display_name(selected.card_type)}")
        detail_col1.write(f"Card Number: {selected.card_number}")
        detail_col2.write(f"Card Expiry: {selected.card_expiry.strftime('%d/%m/%Y')}")
        detail_col2.write(f"Days Remaining: {selected.days_until_expiry}")
        detail_col2.write(f"Passport: {selected.passport_number}")
        detail_col2.write(f"Email: {selected.email}")
else:
    st.warning("No employees match the current view.")

# --- Status Chart ---
tier_counts = pd.Series(
    [get_severity_tier(employee.days_until_expiry).value for employee in employees]
).value_counts().reindex([tier.value for tier in SeverityTier], fill_value=0)

fig = px.bar(
    x=tier_counts.index,
    y=tier_counts.values,
    labels={'x': 'Status', 'y': 'Number of Employees'},
    color=tier_counts.index,
    color_discrete_map=TIER_COLORS
)
fig.update_layout(showlegend=False, height=350, xaxis_title="Status", yaxis_title="Number of Employees")
fig.update_traces(hovertemplate="<b>Status:</b> %{x}<br><b>Employees:</b> %{y}<extra></extra>")
st.plotly_chart(fig, use_container_width=True)

# --- Email Preview ---
st.markdown("<hr style='margin: 20px 0 0 0; border: 1px solid #ddd;'>", unsafe_allow_html=True)
st.subheader("📧 Email Reports")

report_type = st.selectbox(
    "Report type",
    list(ReportType),
    format_func=lambda t: {"expired": "Expired", "urgent": "Expiring Soon", "both": "Full Report"}[t.value],
)
report = build_report(report_type, employees, today)

if report is None:
    st.success(EMPTY_REPORT_MESSAGES[report_type])
else:
    st.text_input("Subject", value=report.subject.strip())
    st.code(report.body, language="html")
    st.markdown(report.body, unsafe_allow_html=True)
