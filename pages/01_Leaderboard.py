# pages/01_Leaderboard.py
from __future__ import annotations

import html
import os, sys
import pandas as pd
import streamlit as st

# --- Make imports work when this file lives in /pages ---
APP_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if APP_DIR not in sys.path:
    sys.path.insert(0, APP_DIR)

from config import CACHE_TTL, PARTITION_LABELS, REFRESH_SECONDS
from student_rankings import get_student_rankings
from utils import full_name, house_color

st.set_page_config(page_title="Leaderboard", page_icon="🏆", layout="wide")
st.title("🏆 Student Leaderboard")


@st.cache_data(ttl=CACHE_TTL, show_spinner="Loading leaderboard...")
def load_rankings() -> tuple[dict, int]:
    return get_student_rankings()


def refresh_all():
    load_rankings.clear()


def render_card(student: pd.Series) -> str:
    name = html.escape(full_name(student["first_name"], student["last_name"]))
    return (
        f'<div style="background:{house_color(student["house_id"])};color:#fff;'
        'border-radius:10px;padding:0.6rem 1rem;margin-bottom:0.5rem;'
        'display:flex;justify-content:space-between;">'
        f'<span><b>#{int(student["rank"])}</b>&nbsp;&nbsp;{name}</span>'
        f'<span>{student["total_points"]} pts</span>'
        "</div>"
    )


st.button("🔄 Refresh", on_click=refresh_all)


@st.fragment(run_every=REFRESH_SECONDS)
def show_leaderboard():
    payload, status = load_rankings()
    if not payload["success"]:
        if status == 404:
            st.info("No students on the leaderboard yet.")
        else:
            st.error(f"Failed to load leaderboard: {payload['error']}")
        return

    rankings = pd.DataFrame(payload["data"])
    columns = st.columns(2)
    for col, is_male in zip(columns, (True, False)):
        with col:
            st.subheader(PARTITION_LABELS[is_male])
            group = rankings[rankings["is_male"] == is_male]
            if group.empty:
                st.caption("No students in this group.")
                continue
            cards = "".join(render_card(row) for _, row in group.iterrows())
            st.markdown(cards, unsafe_allow_html=True)


show_leaderboard()
