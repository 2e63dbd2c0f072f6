"""
Resume → lab matching through the OpenAI chat API.

Two calls:
    1. extract the student's major and keywords from the resume text
    2. score every lab 1–5 against that profile, with a short reason

The second response is parsed block by block ("---" separated). Labs the
model skipped get score 0. Only labs scoring >= MATCH_THRESHOLD are kept,
best first.

Public API:
    match_resume(client, resume_text, labs, model) → (profile, list[dict])
    parse_profile(text) / parse_analysis(text) / merge_analysis(labs, analysis)
"""

import json
import logging
import re
from typing import Any

from openai import OpenAI

from labs.directory import Lab

log = logging.getLogger(__name__)

DEFAULT_MODEL   = "gpt-4o-mini"
MATCH_THRESHOLD = 3
NO_REASON       = "No match details provided."

PROFILE_PROMPT = (
    "Extract the academic major and key skills or research interests from this document. "
    "Respond in the format: Major: <major>\nKeywords: <comma-separated keywords>."
)

ANALYSIS_PROMPT = (
    "Analyze the following details about a student and compare them with these lab descriptions.\n"
    "For each lab in the list, provide:\n"
    "- A similarity score between 1 and 5\n"
    "- A match reason with short bullet points explaining why the lab is a good match.\n"
    "Return analysis for EVERY lab provided.\n"
    "Respond in the following format for each lab:\n"
    "Lab ID: <id>\n"
    "Similarity Score: <score>\n"
    "Match Reason: <reason>\n"
    "---"
)


class MatchError(ValueError):
    """The model's reply could not be turned into a usable result."""


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_profile(text: str) -> dict[str, str]:
    major    = re.search(r"Major:\s*(.+)", text or "")
    keywords = re.search(r"Keywords:\s*(.+)", text or "")
    if not major or not keywords:
        raise MatchError("Failed to parse document details")
    return {"major": major.group(1).strip(), "keywords": keywords.group(1).strip()}


def parse_analysis(text: str) -> dict[int, dict[str, Any]]:
    """Map lab id → {"score", "reason"}; malformed blocks are skipped."""
    analysis: dict[int, dict[str, Any]] = {}
    for block in (text or "").split("---"):
        lab_id = re.search(r"Lab ID:\s*(\d+)", block)
        score  = re.search(r"Similarity Score:\s*(\d+)", block)
        reason = re.search(r"Match Reason:\s*([\s\S]+)", block)
        if not lab_id or not score or not reason:
            continue
        analysis[int(lab_id.group(1))] = {
            "score":  int(score.group(1)),
            "reason": reason.group(1).strip(),
        }
    return analysis


def merge_analysis(
    labs: list[Lab],
    analysis: dict[int, dict[str, Any]],
    threshold: int = MATCH_THRESHOLD,
) -> list[dict[str, Any]]:
    merged = []
    for lab in labs:
        hit = analysis.get(lab.id)
        merged.append({
            "lab":    lab,
            "score":  hit["score"] if hit else 0,
            "reason": hit["reason"] if hit else NO_REASON,
        })
    merged.sort(key=lambda m: m["score"], reverse=True)
    return [m for m in merged if m["score"] >= threshold]


# ---------------------------------------------------------------------------
# LLM calls
# ---------------------------------------------------------------------------

def _lab_context(labs: list[Lab]) -> str:
    rows = [
        {
            "id":          lab.id,
            "name":        lab.name,
            "department":  lab.department,
            "professor":   lab.professor,
            "description": lab.description,
        }
        for lab in labs
    ]
    return json.dumps(rows, indent=2, ensure_ascii=False)


def _complete(client: OpenAI, model: str, system: str, user: str, max_tokens: int) -> str:
    completion = client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": system},
            {"role": "user",   "content": user},
        ],
        max_tokens=max_tokens,
    )
    content = (completion.choices[0].message.content or "").strip()
    if not content:
        raise MatchError("Empty response from the model")
    return content


def extract_profile(client: OpenAI, resume_text: str, model: str = DEFAULT_MODEL) -> dict[str, str]:
    content = _complete(
        client, model, PROFILE_PROMPT,
        "Analyze this document and extract the most relevant academic major along with "
        "additional keywords that represent skills or interests.\n\n" + resume_text,
        max_tokens=150,
    )
    return parse_profile(content)


def rank_labs(
    client: OpenAI,
    profile: dict[str, str],
    labs: list[Lab],
    model: str = DEFAULT_MODEL,
) -> dict[int, dict[str, Any]]:
    user = (
        f"Details:\nMajor: {profile['major']}\nKeywords: {profile['keywords']}\n\n"
        f"Lab Descriptions:\n{_lab_context(labs)}"
    )
    content = _complete(client, model, ANALYSIS_PROMPT, user, max_tokens=1000)
    return parse_analysis(content)


def match_resume(
    client: OpenAI,
    resume_text: str,
    labs: list[Lab],
    model: str = DEFAULT_MODEL,
) -> tuple[dict[str, str], list[dict[str, Any]]]:
    """Profile the resume, score all labs, keep the strong matches."""
    if not labs:
        raise MatchError("No labs found")

    profile = extract_profile(client, resume_text, model)
    log.info("  Profile: major=%r  keywords=%r", profile["major"], profile["keywords"])

    analysis = rank_labs(client, profile, labs, model)
    log.info("  Model scored %d of %d labs", len(analysis), len(labs))

    return profile, merge_analysis(labs, analysis)
