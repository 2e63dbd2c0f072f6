"""
Lab records and the search & filter engine.

A Lab is immutable; its three label sequences are derived from the
raw description and department by the model validator, so every way of
creating a Lab (build, revise, model_validate on load) recomputes them.

Filtering is a pure AND of four predicates (search text, department,
focus, major). Each filter category holds at most one selected value:
FilterState stores them as `str | None`, so selecting a value replaces the
previous one and selecting "" clears the category.

Public API:
    Lab, FilterState
    search_match / department_match / focus_match / major_match
    filter_labs(labs, state) → list[Lab]
    LabDirectory(labs).query(state) / .get(lab_id) / .filter_options()
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator

from labs.classifier import classify_lab
from labs.taxonomy import DEPARTMENTS, FOCUS_AREAS, MAJORS

DEFAULTS: dict[str, str] = {
    "name":             "Unknown",
    "department":       "Unknown",
    "professor":        "Unknown",
    "contact":          "N/A",
    "description":      "No description available.",
    "application_link": "#",
    "major":            "N/A",
}

FILTER_CATEGORIES = ("department", "focus", "major")


def _raw(field: str, value: str) -> str:
    """Text as the classifier should see it: placeholders count as empty."""
    return "" if value == DEFAULTS[field] else value


class Lab(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str                  = DEFAULTS["name"]
    department: str            = DEFAULTS["department"]
    professor: str             = DEFAULTS["professor"]
    contact: str               = DEFAULTS["contact"]
    description: str           = DEFAULTS["description"]
    application_link: str      = DEFAULTS["application_link"]
    major: str                 = DEFAULTS["major"]
    funding: int | None        = None
    match_score: int | None    = None
    relevant_majors: tuple[str, ...]      = ()
    focus_areas: tuple[str, ...]          = ()
    assigned_departments: tuple[str, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _derive_labels(cls, data: Any) -> Any:
        """Fill placeholders and compute labels; supplied label values are ignored."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for key, default in DEFAULTS.items():
            if not data.get(key):
                data[key] = default
        labels = classify_lab(
            _raw("description", data["description"]),
            _raw("department", data["department"]),
        )
        data.update({k: tuple(v) for k, v in labels.items()})
        return data

    @classmethod
    def build(cls, lab_id: int, **fields: Any) -> "Lab":
        """Create a lab; labels come from description + department."""
        return cls(id=lab_id, **fields)

    def revise(self, **changes: Any) -> "Lab":
        """Return a copy with updated fields and freshly computed labels."""
        fields = self.model_dump(exclude={"id"})
        fields.update(changes)
        return Lab.build(self.id, **fields)


class FilterState(BaseModel):
    model_config = ConfigDict(frozen=True)

    search: str = ""
    department: str | None = None
    focus: str | None = None
    major: str | None = None

    def select(self, category: str, value: str | None) -> "FilterState":
        """Select one value in a category, replacing any previous selection."""
        if category not in FILTER_CATEGORIES:
            raise ValueError(f"Unknown filter category: {category!r}")
        return self.model_copy(update={category: value or None})

    def with_search(self, term: str | None) -> "FilterState":
        return self.model_copy(update={"search": term or ""})

    def clear(self) -> "FilterState":
        return FilterState(search=self.search)


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

def search_match(lab: Lab, term: str | None) -> bool:
    if not term:
        return True
    needle = term.lower()
    haystack = [lab.name, lab.department, lab.description, lab.professor,
                *lab.relevant_majors, *lab.focus_areas]
    return any(needle in field.lower() for field in haystack)


def department_match(lab: Lab, department: str | None) -> bool:
    return not department or department in lab.assigned_departments


def focus_match(lab: Lab, focus: str | None) -> bool:
    return not focus or focus in lab.focus_areas


def major_match(lab: Lab, major: str | None) -> bool:
    return not major or major in lab.relevant_majors


def _department_rank(lab: Lab, department: str) -> int:
    try:
        return lab.assigned_departments.index(department)
    except ValueError:
        return len(DEPARTMENTS.keywords)


def filter_labs(labs: list[Lab], state: FilterState) -> list[Lab]:
    """
    Labs passing every active filter, in display order.

    With a department selected, labs whose best-scored department is the
    selected one come first. Otherwise labs keep source order (id).
    The input list is left untouched.
    """
    matched = [
        lab for lab in labs
        if search_match(lab, state.search)
        and department_match(lab, state.department)
        and focus_match(lab, state.focus)
        and major_match(lab, state.major)
    ]

    if state.department:
        return sorted(matched, key=lambda lab: (_department_rank(lab, state.department), lab.id))
    return sorted(matched, key=lambda lab: lab.id)


# ---------------------------------------------------------------------------
# Directory
# ---------------------------------------------------------------------------

class LabDirectory:
    def __init__(self, labs: list[Lab]):
        self.labs = list(labs)
        self._by_id = {lab.id: lab for lab in self.labs}

    def __len__(self) -> int:
        return len(self.labs)

    def query(self, state: FilterState | None = None) -> list[Lab]:
        return filter_labs(self.labs, state or FilterState())

    def get(self, lab_id: int) -> Lab | None:
        """Lab with this id, or None."""
        return self._by_id.get(lab_id)

    @staticmethod
    def filter_options() -> dict[str, list[str]]:
        return {
            "departments": DEPARTMENTS.labels,
            "focus":       FOCUS_AREAS.labels,
            "majors":      MAJORS.labels,
        }
