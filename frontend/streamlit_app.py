"""
Streamlit frontend for Slug Labs.

Calls the FastAPI backend (GET /labs, GET /filters, POST /match) and shows
the directory with one search box and three single-select filters, plus a
resume-text panel for LLM matching.
"""

import os

import requests
import streamlit as st

API_URL = os.getenv("API_URL", "http://localhost:8000")

ALL = {"departments": "All departments", "focus": "All focus areas", "majors": "All majors"}

st.set_page_config(page_title="Slug Labs", layout="wide")
st.title("Slug Labs")
st.caption("Discover Research, Unlock Opportunities")


def _get(path: str, **params) -> dict:
    resp = requests.get(f"{API_URL}{path}", params=params, timeout=30)
    resp.raise_for_status()
    return resp.json()


def _lab_card(lab: dict, extra: str = "") -> None:
    with st.expander(f"{lab['name']} — {lab['department']}{extra}"):
        st.write(lab["description"])
        st.markdown(f"**Professor:** {lab['professor']}  \n**Contact:** {lab['contact']}")
        if lab["major"] != "N/A":
            st.markdown(f"**Listed major:** {lab['major']}")
        if lab["relevant_majors"]:
            st.markdown("**Majors:** " + ", ".join(lab["relevant_majors"]))
        if lab["focus_areas"]:
            st.markdown("**Focus:** " + ", ".join(lab["focus_areas"]))
        if lab["application_link"] != "#":
            st.link_button("Apply!", lab["application_link"])


try:
    options = _get("/filters")
except requests.exceptions.RequestException:
    st.error(f"Cannot reach the API at {API_URL}. Start it with: python app/app.py")
    st.stop()

directory_tab, match_tab = st.tabs(["Lab Directory", "Match my resume"])

with directory_tab:
    with st.sidebar:
        st.header("Filters")
        dept  = st.selectbox("Department", [ALL["departments"]] + options["departments"])
        focus = st.selectbox("Focus", [ALL["focus"]] + options["focus"])
        major = st.selectbox("Major", [ALL["majors"]] + options["majors"])

    term = st.text_input("Search for labs…", placeholder="e.g. robotics, Carter, marine")

    params = {"q": term}
    if dept != ALL["departments"]:
        params["department"] = dept
    if focus != ALL["focus"]:
        params["focus"] = focus
    if major != ALL["majors"]:
        params["major"] = major

    try:
        data = _get("/labs", **params)
    except requests.exceptions.RequestException as exc:
        st.error(f"API error: {exc}")
        st.stop()

    st.subheader(f"{data['count']} labs")
    for lab in data["labs"]:
        _lab_card(lab)

with match_tab:
    resume = st.text_area("Paste your resume or transcript text", height=250)
    if st.button("Find labs"):
        if not resume.strip():
            st.warning("Please paste some resume text.")
        else:
            with st.spinner("Matching…"):
                try:
                    resp = requests.post(f"{API_URL}/match", json={"resume_text": resume}, timeout=120)
                    resp.raise_for_status()
                    result = resp.json()
                except requests.exceptions.RequestException as exc:
                    st.error(f"API error: {exc}")
                    st.stop()

            st.info(f"Major: {result['major']}  \nKeywords: {result['keywords']}")
            if not result["labs"]:
                st.info("No strong matches found.")
            for m in result["labs"]:
                _lab_card(m["lab"], extra=f"  ({m['score']}/5)")
                st.caption(m["reason"])
