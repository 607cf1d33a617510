# dashboard/streamlit_app.py
# port for streamlit app: 8501

import math
import re

import pandas as pd
import streamlit as st
from api_client import (
    API_BASE,
    add_program,
    add_website,
    delete_history,
    delete_program,
    delete_website,
    download_file,
    error_detail,
    export_scripts,
    get_blocklist,
    get_versions,
    preview_scripts,
)

# -------------------------------
# CONFIG
# -------------------------------

st.set_page_config(
    page_title="Game Blocker",
    page_icon="🎮",
    layout="wide",
)

PER_PAGE = 5


def suggested_name(process_name: str) -> str:
    """'roblox_player-beta.exe' -> 'Roblox player beta'"""
    stem = re.sub(r"\.exe$", "", process_name, flags=re.IGNORECASE)
    stem = re.sub(r"[-_]", " ", stem).strip()
    return stem[:1].upper() + stem[1:]


# -------------------------------
# FETCH DATA (API ONLY)
# -------------------------------

if "history_page" not in st.session_state:
    st.session_state.history_page = 1

try:
    blocklist = get_blocklist()
    versions = get_versions(page=st.session_state.history_page, per_page=PER_PAGE)
except Exception as exc:
    st.error(f"Cannot reach the API at {API_BASE}: {exc}")
    st.stop()


# -------------------------------
# HEADER
# -------------------------------

st.markdown("<h2 style='text-align:center;'>Game Blocker</h2>", unsafe_allow_html=True)

c1, c2, c3 = st.columns(3)
c1.metric("🌐 Websites", len(blocklist["websites"]))
c2.metric("🖥️ Programs", len(blocklist["programs"]))
c3.metric("🏷️ Next export", versions["currentVersion"])
st.divider()


# -------------------------------
# WEBSITES
# -------------------------------

col_web, col_prog = st.columns(2)

with col_web:
    st.subheader("🌐 Blocked Websites")
    with st.form("add_website", clear_on_submit=True):
        new_url = st.text_input("Website", placeholder="roblox.com")
        if st.form_submit_button("Add website"):
            try:
                add_website(new_url)
                st.success(f"Added {new_url}")
                st.rerun()
            except Exception as exc:
                st.error(f"Failed to add website: {error_detail(exc)}")

    if not blocklist["websites"]:
        st.info("No websites blocked yet.")
    for w in blocklist["websites"]:
        cols = st.columns([4, 1])
        cols[0].markdown(f"`{w['url']}`")
        if cols[1].button("🗑️", key=f"del_web_{w['id']}"):
            delete_website(w["id"])
            st.rerun()


# -------------------------------
# PROGRAMS
# -------------------------------

with col_prog:
    st.subheader("🖥️ Blocked Programs")
    with st.form("add_program", clear_on_submit=True):
        path = st.text_input("Path", placeholder=r"C:\Games\Roblox\Versions\*")
        process_name = st.text_input("Process name (optional)", placeholder="RobloxPlayerBeta.exe")
        name = st.text_input("Display name (optional if process name is set)")
        if st.form_submit_button("Add program"):
            name = name or (suggested_name(process_name) if process_name else "")
            try:
                add_program(name, path, process_name)
                st.success(f"Added {name}")
                st.rerun()
            except Exception as exc:
                st.error(f"Failed to add program: {error_detail(exc)}")

    if not blocklist["programs"]:
        st.info("No programs blocked yet.")
    for p in blocklist["programs"]:
        cols = st.columns([4, 1])
        cols[0].markdown(f"**{p['name']}** — `{p['path']}` ({p['processName']})")
        if cols[1].button("🗑️", key=f"del_prog_{p['id']}"):
            delete_program(p["id"])
            st.rerun()


# -------------------------------
# EXPORT
# -------------------------------

st.divider()
st.subheader("📦 Export BAT files")

colE1, colE2 = st.columns(2)
with colE1:
    if st.button(f"Export {versions['currentVersion']} 🚀"):
        try:
            result = export_scripts()
            st.success(f"Exported {result['version']}: {result['files']['block']}, {result['files']['unblock']}")
            st.rerun()
        except Exception as exc:
            st.error(f"Export failed: {error_detail(exc)}")
with colE2:
    show_preview = st.toggle("Preview next export")

if show_preview:
    preview = preview_scripts()
    tab_block, tab_unblock = st.tabs([preview["files"]["block"]["name"], preview["files"]["unblock"]["name"]])
    tab_block.code(preview["files"]["block"]["content"], language="batch")
    tab_unblock.code(preview["files"]["unblock"]["content"], language="batch")


# -------------------------------
# EXPORT HISTORY
# -------------------------------

st.subheader("🕓 Export History")

history = versions["history"]
if not history:
    st.info("No exports yet.")
else:
    df = pd.DataFrame(history)
    df["date"] = pd.to_datetime(df["date"]).dt.strftime("%Y-%m-%d %H:%M")
    st.dataframe(df[["version", "date", "blockFile", "unblockFile"]], hide_index=True)

    for h in history:
        cols = st.columns([2, 2, 2, 1])
        cols[0].markdown(f"**{h['version']}**")
        for col, key in ((cols[1], "blockFile"), (cols[2], "unblockFile")):
            try:
                col.download_button(h[key], data=download_file(h[key]), file_name=h[key], key=f"dl_{h[key]}")
            except Exception:
                col.warning("File missing")
        if cols[3].button("🗑️", key=f"del_hist_{h['version']}"):
            delete_history(h["version"])
            st.session_state.history_page = 1
            st.rerun()

    pages = max(1, math.ceil(versions["total"] / PER_PAGE))
    if pages > 1:
        page = st.number_input("Page", min_value=1, max_value=pages, value=st.session_state.history_page)
        if page != st.session_state.history_page:
            st.session_state.history_page = int(page)
            st.rerun()


# -------------------------------
# FOOTER
# -------------------------------

st.markdown("<p style='text-align:center;color:gray;'>© Game Blocker</p>", unsafe_allow_html=True)
