"""
FastAPI application — single entry point for the lab directory.

Run as a script to build data if needed and serve:
    python app/app.py

Or run as a module if data is already built:
    uvicorn app.app:app --reload

Startup loads data/labs.json; if it is missing, the lab sheet is fetched
and labelled first (etl.pipeline.run).

Endpoints:
    GET  /labs?q=&department=&focus=&major=   filtered directory listing
    GET  /labs/{id}                           one lab (404 if unknown)
    GET  /filters                             options for the three filters
    POST /labs/refresh                        re-fetch the sheet, relabel
    POST /match   body: {"resume_text": "..."} LLM-ranked labs for a resume

Logs each query and wall-clock response time to stdout and logs/app.log
(rotating, 5 MB max, 3 backups).
"""

import logging
import logging.handlers
import os
import sys
import time
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from openai import OpenAI
from pydantic import BaseModel

# Ensure project root is on sys.path when running as a script (python app/app.py)
sys.path.insert(0, str(Path(__file__).parent.parent))

from etl import pipeline
from labs.directory import FilterState, Lab, LabDirectory
from labs.matcher import DEFAULT_MODEL, MatchError, match_resume

load_dotenv()

LOG_DIR  = Path(__file__).parent.parent / "logs"
LOG_FILE = LOG_DIR / "app.log"

OPENAI_MODEL = os.getenv("OPENAI_MODEL", DEFAULT_MODEL)


def _setup_logging() -> None:
    LOG_DIR.mkdir(exist_ok=True)
    fmt = logging.Formatter("%(asctime)s  %(levelname)s  %(message)s")

    stream = logging.StreamHandler(sys.stdout)
    stream.setFormatter(fmt)

    # Rotate at 5 MB, keep 3 backups
    rotating = logging.handlers.RotatingFileHandler(
        LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
    )
    rotating.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(logging.INFO)
    root.addHandler(stream)
    root.addHandler(rotating)

_setup_logging()
log = logging.getLogger("api")


# ---------------------------------------------------------------------------
# Data loading
# ---------------------------------------------------------------------------

def _load_labs() -> list[Lab]:
    """Persisted labs, or a fresh ETL run when labs.json is missing."""
    path = pipeline.LABS_FILE
    if path.exists():
        labs = pipeline.load(path)
        log.info("labs.json exists — %d labs loaded.", len(labs))
        return labs

    log.info("labs.json missing — fetching the lab sheet…")
    try:
        return pipeline.run(path=path)
    except RuntimeError as exc:
        log.error("  %s — starting with an empty directory.", exc)
        return []


# ---------------------------------------------------------------------------
# App + lifespan
# ---------------------------------------------------------------------------

_directory: LabDirectory | None = None
_openai: OpenAI | None = None


@asynccontextmanager
async def lifespan(_: FastAPI):
    global _directory, _openai

    _directory = LabDirectory(_load_labs())
    log.info("  Directory ready: %d labs.", len(_directory))

    if os.getenv("OPENAI_API_KEY"):
        _openai = OpenAI()
        log.info("  OpenAI client ready (%s).", OPENAI_MODEL)
    else:
        log.warning("  OPENAI_API_KEY not set — /match disabled.")

    yield  # server runs here


app = FastAPI(title="Slug Labs", lifespan=lifespan)


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

class LabsResponse(BaseModel):
    count: int
    labs: list[Lab]


class FiltersResponse(BaseModel):
    departments: list[str]
    focus: list[str]
    majors: list[str]


class RefreshResponse(BaseModel):
    count: int


class MatchRequest(BaseModel):
    resume_text: str


class LabMatch(BaseModel):
    lab: Lab
    score: int
    reason: str


class MatchResponse(BaseModel):
    major: str
    keywords: str
    labs: list[LabMatch]


def _get_directory() -> LabDirectory:
    if _directory is None:
        raise HTTPException(status_code=503, detail="Lab directory not loaded.")
    return _directory


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@app.get("/labs", response_model=LabsResponse)
def list_labs(
    q: str = "",
    department: str | None = None,
    focus: str | None = None,
    major: str | None = None,
) -> LabsResponse:
    t0 = time.perf_counter()

    state = (
        FilterState()
        .with_search(q)
        .select("department", department)
        .select("focus", focus)
        .select("major", major)
    )
    labs = _get_directory().query(state)

    elapsed = time.perf_counter() - t0
    log.info("q=%r  dept=%r  focus=%r  major=%r  hits=%d  %.3fs",
             q, department, focus, major, len(labs), elapsed)
    return LabsResponse(count=len(labs), labs=labs)


@app.get("/labs/{lab_id}", response_model=Lab)
def get_lab(lab_id: int) -> Lab:
    lab = _get_directory().get(lab_id)
    if lab is None:
        raise HTTPException(status_code=404, detail="Lab not found.")
    return lab


@app.get("/filters", response_model=FiltersResponse)
def filters() -> FiltersResponse:
    return FiltersResponse(**LabDirectory.filter_options())


@app.post("/labs/refresh", response_model=RefreshResponse)
def refresh() -> RefreshResponse:
    global _directory

    log.info("Refreshing labs from the sheet…")
    try:
        labs = pipeline.run()
    except RuntimeError as exc:
        log.error("  Refresh failed: %s", exc)
        raise HTTPException(status_code=502, detail="Could not fetch the lab sheet.")

    _directory = LabDirectory(labs)
    log.info("  Directory rebuilt: %d labs.", len(labs))
    return RefreshResponse(count=len(labs))


@app.post("/match", response_model=MatchResponse)
def match(req: MatchRequest) -> MatchResponse:
    if not req.resume_text.strip():
        raise HTTPException(status_code=400, detail="Resume text must not be empty.")
    if _openai is None:
        raise HTTPException(status_code=503, detail="Resume matching is not configured.")

    t0 = time.perf_counter()
    labs = _get_directory().labs
    log.info("Matching resume (%d chars) against %d labs…", len(req.resume_text), len(labs))

    try:
        profile, matches = match_resume(_openai, req.resume_text, labs, model=OPENAI_MODEL)
    except MatchError as exc:
        log.warning("  Match failed: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc))

    elapsed = time.perf_counter() - t0
    log.info("match major=%r  hits=%d  %.2fs", profile["major"], len(matches), elapsed)

    return MatchResponse(
        major=profile["major"],
        keywords=profile["keywords"],
        labs=[LabMatch(**m) for m in matches],
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    log.info("=== Slug Labs — launching server on http://0.0.0.0:8000 ===")
    uvicorn.run(app, host="0.0.0.0", port=8000, reload=False)
