"""
Loader for the published lab spreadsheet (Google Sheets "publish to web" CSV).

The sheet has one row per lab with the header row:
    Name, Department, Professor, Contact, Description  (required)
    Apply, Major, funding, matchScore                  (optional)

The hosted-table copy of the same data uses different headers
("Lab Name", "Professor Name", "How to apply"); those are renamed to the
sheet's names so downstream code sees one schema.

Public API:
    fetch_csv(url)   → str | None
    parse_rows(text) → list[dict[str, str]]
    fetch_rows(url)  → list[dict[str, str]] | None
"""

import csv
import io
import logging
import os
import time
from typing import Optional

import requests

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

DEFAULT_CSV_URL = (
    "https://docs.google.com/spreadsheets/d/e/"
    "2PACX-1vSmDz9hjnoVXz6sgthlfFxb9HLI8bNDqXa7VGPG1hgCTisC5i1N28FgWR0qmHqAHBepV1fE5_YpIbyq"
    "/pub?output=csv"
)
CSV_URL = os.getenv("LABS_CSV_URL", DEFAULT_CSV_URL)

COLUMN_ALIASES = {
    "Lab Name":       "Name",
    "Professor Name": "Professor",
    "How to apply":   "Apply",
}

log = logging.getLogger(__name__)

SESSION = requests.Session()
SESSION.headers["User-Agent"] = "Slug-Labs/1.0 (lab directory)"


# ---------------------------------------------------------------------------
# HTTP helper
# ---------------------------------------------------------------------------

def fetch_csv(url: str = CSV_URL, retries: int = 3) -> Optional[str]:
    """GET the CSV export with exponential-backoff retries."""
    for attempt in range(retries):
        try:
            resp = SESSION.get(url, timeout=15)
            resp.raise_for_status()
            return resp.content.decode("utf-8-sig", errors="replace")
        except requests.RequestException as exc:
            log.warning("Request failed (attempt %d/%d) %s: %s", attempt + 1, retries, url, exc)
            if attempt < retries - 1:
                time.sleep(2 ** attempt)
    return None


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def normalize_row(row: dict) -> dict[str, str]:
    """Trim keys/values, apply header aliases, drop unnamed columns."""
    clean: dict[str, str] = {}
    for key, value in row.items():
        if not key:
            continue
        key = key.strip()
        key = COLUMN_ALIASES.get(key, key)
        value = value.strip() if isinstance(value, str) else ""
        # the canonical column wins if both spellings are present
        if value or key not in clean:
            clean[key] = value
    return clean


def parse_rows(text: str) -> list[dict[str, str]]:
    """Parse CSV text with a header row.

    Blank rows inside the sheet are kept so ids stay tied to row position;
    only blank rows trailing the last filled one are dropped.
    """
    reader = csv.DictReader(io.StringIO(text))
    rows = [normalize_row(raw) for raw in reader]
    while rows and not any(rows[-1].values()):
        rows.pop()
    return rows


def fetch_rows(url: str = CSV_URL) -> Optional[list[dict[str, str]]]:
    text = fetch_csv(url)
    if text is None:
        log.error("Could not fetch lab sheet: %s", url)
        return None
    rows = parse_rows(text)
    log.info("Fetched %d rows from the lab sheet.", len(rows))
    return rows
