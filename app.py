"""RevisionHub: upload study PDFs, rate recall, revise the most urgent first."""
import sys
from pathlib import Path

# Ensure project root is in path
project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import streamlit as st

from db import get_service, get_supabase
from src.dashboard import (
    SCORE_LABELS,
    SORT_KEYS,
    TIER_HIGH,
    TIER_LABELS,
    format_time_ago,
    priority_tier,
    sort_materials,
    tier_counts,
)
from src.engine import days_since_revision
from src.errors import RevisionHubError

st.set_page_config(page_title="RevisionHub", layout="wide")

# Session state defaults
if "uploader_key" not in st.session_state:
    st.session_state["uploader_key"] = 0  # bump to clear the file uploader after an upload
if "confirm_delete" not in st.session_state:
    st.session_state["confirm_delete"] = None  # material id awaiting confirmation

try:
    service = get_service(get_supabase())
except ValueError as e:
    st.error(f"Configuration error. Check .env (SUPABASE_URL, SUPABASE_KEY, PRIORITY_* settings). {e}")
    st.stop()

try:
    ranked = service.load_ranked()
except RevisionHubError as e:
    st.error(f"Error loading PDFs: {e}")
    st.stop()

now = service.now()

# ----- Sidebar: stats + upload -----
st.sidebar.title("RevisionHub")
st.sidebar.caption("Smart Learning")
stats = tier_counts(ranked)
col1, col2 = st.sidebar.columns(2)
with col1:
    st.metric("Total PDFs", stats["total"])
with col2:
    st.metric("High Priority", stats[TIER_HIGH])

st.sidebar.subheader("Upload Material")
uploaded = st.sidebar.file_uploader(
    "Drop your PDF here",
    type=["pdf"],
    key=f"uploader_{st.session_state['uploader_key']}",
    help="PDF files only",
)
if uploaded is not None and st.sidebar.button("Upload", type="primary", use_container_width=True):
    with st.spinner("Uploading..."):
        try:
            service.upload(uploaded.name, uploaded.getvalue(), uploaded.type)
            st.session_state["uploader_key"] += 1
            st.rerun()
        except RevisionHubError as e:
            st.sidebar.error(f"Upload failed: {e}")

# ----- Main: ranked table -----
st.header("Your Revision Dashboard")
st.caption("Track your progress and prioritize your study materials")

if not ranked:
    st.info("No materials yet. Upload your first PDF from the sidebar to get started.")
    st.stop()

sort_col, order_col = st.columns([2, 1])
with sort_col:
    sort_by = st.selectbox("Sort by", SORT_KEYS, format_func=str.capitalize)
with order_col:
    order = st.radio("Order", ["Descending", "Ascending"], horizontal=True)
rows = sort_materials(ranked, sort_by, descending=order == "Descending", now=now)

header = st.columns([0.5, 4, 2, 1, 1.5, 3, 1])
for col, title in zip(header, ["#", "File Name", "Priority", "Revisions", "Last Revised", "Rate Revision", ""]):
    col.markdown(f"**{title}**")
st.divider()

for idx, material in enumerate(rows, start=1):
    material_id = material["id"]
    days = days_since_revision(material, now)
    cols = st.columns([0.5, 4, 2, 1, 1.5, 3, 1])
    cols[0].write(idx)
    with cols[1]:
        st.markdown(f"[{material['filename']}]({service.public_url(material['storage_path'])})")
        st.caption(format_time_ago(days))
    cols[2].write(f"{TIER_LABELS[priority_tier(material['priority'])]} · {material['priority']:.1f}")
    cols[3].write(material.get("revision_count") or 0)
    cols[4].write(f"{days} days ago")
    with cols[5]:
        rate_cols = st.columns(len(SCORE_LABELS))
        for rate_col, (score, (emoji, label)) in zip(rate_cols, SCORE_LABELS.items()):
            if rate_col.button(emoji, key=f"rate_{material_id}_{score}", help=label):
                try:
                    service.rate(material_id, score)
                    st.rerun()
                except RevisionHubError as e:
                    st.error(f"Rating failed: {e}")
    with cols[6]:
        if st.button("🗑️", key=f"delete_{material_id}", help="Delete"):
            st.session_state["confirm_delete"] = material_id
            st.rerun()

    if st.session_state["confirm_delete"] == material_id:
        st.warning(f'Are you sure you want to delete "{material["filename"]}"? This cannot be undone.')
        yes_col, no_col, _ = st.columns([1, 1, 4])
        with yes_col:
            if st.button("Delete", type="primary", key=f"confirm_{material_id}"):
                st.session_state["confirm_delete"] = None
                try:
                    service.delete(material_id)
                    st.rerun()
                except RevisionHubError as e:
                    st.error(f"Delete failed: {e}")
        with no_col:
            if st.button("Cancel", key=f"cancel_{material_id}"):
                st.session_state["confirm_delete"] = None
                st.rerun()

st.caption("Powered by smart priority algorithms")
