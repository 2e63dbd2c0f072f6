import pytest
import requests

from etl import pipeline, sheet
from etl.pipeline import _parse_int, build_labs, row_to_lab
from etl.sheet import normalize_row, parse_rows

SHEET_CSV = (
    "Name,Department,Professor,Contact,Description,Apply,funding\n"
    'Marine Biology Research Lab,Ocean Sciences,Dr. Emily Carter,marine@ucsc.edu,'
    '"Coral reef restoration, kelp forests and ocean warming.",https://example.edu/apply,"5,000"\n'
    ",,,,,,\n"
    "Quantum Optics Lab,Physics,Dr. Sandra Kim,,,,\n"
)


@pytest.fixture
def sample_rows():
    """Rows as produced by parse_rows."""
    return [
        {
            "Name": "Autonomous Systems Lab",
            "Department": "Computer Science",
            "Professor": "Dr. Alan Park",
            "Contact": "apark@ucsc.edu",
            "Description": "Our lab uses machine learning and neural networks for robotics automation.",
            "Apply": "https://example.edu/apply/asl",
            "funding": "12000",
        },
        {
            "Name": "Quantum Optics Lab",
            "Department": "Physics",
            "Professor": "",
            "Contact": "",
            "Description": "",
        },
    ]


class TestSheetParsing:
    """CSV → row dicts."""

    def test_parse_rows(self):
        rows = parse_rows(SHEET_CSV)
        assert len(rows) == 3
        assert rows[0]["Name"] == "Marine Biology Research Lab"
        assert rows[0]["Description"] == "Coral reef restoration, kelp forests and ocean warming."
        assert not any(rows[1].values())
        assert rows[2]["Contact"] == ""

    def test_trailing_blank_rows_dropped(self):
        rows = parse_rows(SHEET_CSV + ",,,,,,\n,,,,,,\n")
        assert len(rows) == 3
        assert rows[-1]["Name"] == "Quantum Optics Lab"

    def test_blank_middle_row_keeps_ids(self):
        """Ids follow sheet rows, so a blank row in the middle still takes an id."""
        rows = parse_rows("Name,Department,Professor,Contact,Description\n"
                          "Lab A,Physics,,,\n"
                          ",,,,\n"
                          "Lab C,Chemistry,,,\n")
        labs = build_labs(rows)
        assert [lab.id for lab in labs] == [1, 2, 3]
        assert labs[1].name == "Unknown"
        assert labs[1].relevant_majors == ()
        assert labs[2].name == "Lab C"

    def test_hosted_table_aliases(self):
        row = normalize_row({
            "Lab Name": " Soft Robotics Lab ",
            "Professor Name": "Dr. Lee",
            "How to apply": "https://example.edu",
            "Department": "Mechanical Engineering",
        })
        assert row == {
            "Name": "Soft Robotics Lab",
            "Professor": "Dr. Lee",
            "Apply": "https://example.edu",
            "Department": "Mechanical Engineering",
        }

    def test_canonical_column_wins_over_empty_alias(self):
        row = normalize_row({"Name": "Kelp Lab", "Lab Name": ""})
        assert row["Name"] == "Kelp Lab"

    def test_unnamed_and_missing_cells(self):
        row = normalize_row({"Name": "Lab", None: ["extra"], "Contact": None})
        assert row == {"Name": "Lab", "Contact": ""}


class TestFetch:
    """HTTP fetch with retries (no network)."""

    def test_fetch_strips_bom(self, monkeypatch):
        class Resp:
            content = "\ufeffName,Department\nLab,Physics\n".encode("utf-8")

            def raise_for_status(self):
                pass

        monkeypatch.setattr(sheet.SESSION, "get", lambda url, timeout: Resp())
        text = sheet.fetch_csv("https://example.edu/sheet.csv")
        assert text.startswith("Name,")

    def test_fetch_replaces_undecodable_bytes(self, monkeypatch):
        class Resp:
            content = b"Name,Department\nLab \xff,Physics\n"

            def raise_for_status(self):
                pass

        monkeypatch.setattr(sheet.SESSION, "get", lambda url, timeout: Resp())
        text = sheet.fetch_csv("https://example.edu/sheet.csv")
        assert "Lab \ufffd" in text

    def test_run_survives_bad_encoding(self, tmp_path, monkeypatch):
        class Resp:
            content = b"Name,Department\nLab \xff,Physics\n"

            def raise_for_status(self):
                pass

        monkeypatch.setattr(sheet.SESSION, "get", lambda url, timeout: Resp())
        labs = pipeline.run(url="https://example.edu/sheet.csv", path=tmp_path / "labs.json")
        assert [lab.id for lab in labs] == [1]
        assert labs[0].relevant_majors == ("Physics",)

    def test_fetch_gives_up_after_retries(self, monkeypatch):
        calls = []

        def failing_get(url, timeout):
            calls.append(url)
            raise requests.ConnectionError("offline")

        monkeypatch.setattr(sheet.SESSION, "get", failing_get)
        monkeypatch.setattr(sheet.time, "sleep", lambda s: None)

        assert sheet.fetch_csv("https://example.edu/sheet.csv", retries=3) is None
        assert len(calls) == 3
        assert sheet.fetch_rows("https://example.edu/sheet.csv") is None


class TestRowToLab:

    def test_ids_are_one_based_row_positions(self, sample_rows):
        labs = build_labs(sample_rows)
        assert [lab.id for lab in labs] == [1, 2]

    def test_fields_and_labels(self, sample_rows):
        lab = row_to_lab(0, sample_rows[0])
        assert lab.name == "Autonomous Systems Lab"
        assert lab.application_link == "https://example.edu/apply/asl"
        assert lab.funding == 12000
        assert lab.match_score is None
        assert lab.relevant_majors == ("Computer Science", "Mechanical Engineering")

    def test_defaults_for_missing_fields(self, sample_rows):
        lab = row_to_lab(1, sample_rows[1])
        assert lab.professor == "Unknown"
        assert lab.contact == "N/A"
        assert lab.description == "No description available."
        assert lab.application_link == "#"
        assert lab.relevant_majors == ("Physics",)
        assert lab.focus_areas == ()
        assert lab.major == "N/A"

    def test_major_column(self):
        lab = row_to_lab(0, {"Name": "Kelp Lab", "Major": "Marine Biology"})
        assert lab.major == "Marine Biology"

    @pytest.mark.parametrize("raw,expected", [
        ("5000", 5000),
        ("5,000", 5000),
        ("$7,500", 7500),
        ("82.0", 82),
        ("", None),
        (None, None),
        ("n/a", None),
    ])
    def test_parse_int(self, raw, expected):
        assert _parse_int(raw) == expected


class TestPipeline:

    def test_run_saves_and_loads(self, sample_rows, tmp_path, monkeypatch):
        monkeypatch.setattr(pipeline, "fetch_rows", lambda url: sample_rows)
        path = tmp_path / "labs.json"

        labs = pipeline.run(url="https://example.edu/sheet.csv", path=path)
        assert path.exists()
        assert pipeline.load(path) == labs

    def test_run_raises_when_sheet_unreachable(self, tmp_path, monkeypatch):
        monkeypatch.setattr(pipeline, "fetch_rows", lambda url: None)
        with pytest.raises(RuntimeError):
            pipeline.run(path=tmp_path / "labs.json")

    def test_load_missing_file(self, tmp_path):
        assert pipeline.load(tmp_path / "nope.json") == []
