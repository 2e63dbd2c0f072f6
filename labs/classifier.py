"""
Keyword relevance classifier.

Scores every label of a taxonomy against a lab's description and (for
scored taxonomies) its declared department string:

    +5  department == label           (case-insensitive)
    +3  label is a substring of department
    +n  distinct keywords found in the description, n capped at 5

A label qualifies at score >= 2. Qualifying labels are returned by
descending score; equal scores keep taxonomy order.

Focus areas skip the department step and the threshold: a focus label
qualifies as soon as one of its keywords appears in the description.

Public API:
    score_labels(taxonomy, description, subject) → list[(label, score)]
    classify(description, subject, taxonomy)     → list[str]
    classify_lab(description, department)        → dict[str, list[str]]
"""

from labs.taxonomy import (
    DEPARTMENTS,
    EXACT_SUBJECT_WEIGHT,
    FOCUS_AREAS,
    KEYWORD_CAP,
    MAJORS,
    PARTIAL_SUBJECT_WEIGHT,
    SCORE_THRESHOLD,
    Taxonomy,
)


def _norm(text: str | None) -> str:
    return (text or "").lower()


def keyword_hits(description: str | None, keywords: tuple[str, ...]) -> int:
    """Number of distinct keywords contained in the description."""
    text = _norm(description)
    if not text:
        return 0
    return len({k.lower() for k in keywords if k.lower() in text})


def score_labels(
    taxonomy: Taxonomy,
    description: str | None,
    subject: str | None = None,
) -> list[tuple[str, int]]:
    """Score every label of the taxonomy, in taxonomy order."""
    subject_text = _norm(subject) if taxonomy.uses_subject else ""

    scores = []
    for label, keywords in taxonomy.keywords.items():
        score = 0
        name = label.lower()
        if subject_text:
            if subject_text == name:
                score += EXACT_SUBJECT_WEIGHT
            elif name in subject_text:
                score += PARTIAL_SUBJECT_WEIGHT
        score += min(keyword_hits(description, keywords), KEYWORD_CAP)
        scores.append((label, score))
    return scores


def classify(
    description: str | None,
    subject: str | None,
    taxonomy: Taxonomy,
) -> list[str]:
    """Return the taxonomy labels that apply to a lab, best first."""
    scores = score_labels(taxonomy, description, subject)

    if not taxonomy.scored:
        return [label for label, score in scores if score > 0]

    qualifying = [(label, score) for label, score in scores if score >= SCORE_THRESHOLD]
    # sorted() is stable, so ties keep taxonomy order
    qualifying = sorted(qualifying, key=lambda pair: pair[1], reverse=True)
    return [label for label, _ in qualifying]


def analyze_lab_for_majors(description: str | None, department: str | None) -> list[str]:
    return classify(description, department, MAJORS)


def analyze_lab_for_focus(description: str | None) -> list[str]:
    return classify(description, None, FOCUS_AREAS)


def analyze_lab_for_departments(description: str | None, department: str | None) -> list[str]:
    return classify(description, department, DEPARTMENTS)


def classify_lab(description: str | None, department: str | None) -> dict[str, list[str]]:
    """All three label sets for one lab, keyed by Lab field name."""
    return {
        "relevant_majors":      analyze_lab_for_majors(description, department),
        "focus_areas":          analyze_lab_for_focus(description),
        "assigned_departments": analyze_lab_for_departments(description, department),
    }
