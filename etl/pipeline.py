"""
ETL pipeline: sheet rows → labelled Lab records → data/labs.json.

Each row becomes a Lab whose id is its 1-based position in the sheet.
Missing text fields fall back to fixed placeholders (see labs.directory),
and labels are computed as each Lab is created, so queries never re-score.
"""

import json
import logging
from pathlib import Path
from typing import Optional

from etl.sheet import CSV_URL, fetch_rows
from labs.directory import Lab

DATA_DIR  = Path(__file__).parent.parent / "data"
LABS_FILE = DATA_DIR / "labs.json"

# Lab field ← sheet column
FIELD_MAP = {
    "name":             "Name",
    "department":       "Department",
    "professor":        "Professor",
    "contact":          "Contact",
    "description":      "Description",
    "application_link": "Apply",
    "major":            "Major",
}

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _parse_int(value: Optional[str]) -> Optional[int]:
    """'12,000' → 12000; blanks and junk → None."""
    if not value:
        return None
    digits = value.replace(",", "").replace("$", "").strip()
    try:
        return int(float(digits))
    except (ValueError, OverflowError):
        return None


def row_to_lab(index: int, row: dict[str, str]) -> Lab:
    """Build the Lab for the index-th (0-based) sheet row."""
    fields = {field: (row.get(column) or "").strip() for field, column in FIELD_MAP.items()}
    return Lab.build(
        index + 1,
        **fields,
        funding=_parse_int(row.get("funding")),
        match_score=_parse_int(row.get("matchScore")),
    )


def build_labs(rows: list[dict[str, str]]) -> list[Lab]:
    return [row_to_lab(i, row) for i, row in enumerate(rows)]


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------

def save(labs: list[Lab], path: Path = LABS_FILE) -> None:
    path.parent.mkdir(exist_ok=True)
    path.write_text(
        json.dumps([lab.model_dump() for lab in labs], indent=2, ensure_ascii=False),
        encoding="utf-8",
    )


def load(path: Path = LABS_FILE) -> list[Lab]:
    """Load persisted labs; return [] if the file doesn't exist."""
    if not path.exists():
        return []
    return [Lab.model_validate(item) for item in json.loads(path.read_text(encoding="utf-8"))]


# ---------------------------------------------------------------------------
# Entry point (importable, not a CLI)
# ---------------------------------------------------------------------------

def run(url: str = CSV_URL, path: Path = LABS_FILE) -> list[Lab]:
    """Fetch the sheet, label every lab, save labs.json, return the result."""
    rows = fetch_rows(url)
    if rows is None:
        raise RuntimeError(f"Could not fetch lab sheet from {url}")

    labs = build_labs(rows)
    save(labs, path)
    log.info("Saved %d labs → %s", len(labs), path.name)
    return labs
