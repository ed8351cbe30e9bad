# ==== IMPORTS ====
import streamlit as st

from config import REFRESH_SECONDS

# ==== CONSTANTS ====
APP_NAME = "Student Points Leaderboard"

st.set_page_config(page_title=APP_NAME, page_icon="🏆")
st.title(f"🏆 {APP_NAME}")

st.write(
    "Students earn points by taking part in events. "
    "Dikrao and Dikrio are ranked separately and the board "
    f"updates itself every {REFRESH_SECONDS} seconds."
)
st.page_link("pages/01_Leaderboard.py", label="Open the leaderboard", icon="🏆")
