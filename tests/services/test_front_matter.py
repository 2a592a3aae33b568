import datetime

import pytest

from folio.services.front_matter import (
    NOT_A_MAPPING,
    load_metadata,
    parse_date,
    parse_draft,
    parse_lines,
    parse_tags,
    parse_title,
)

UTC = datetime.timezone.utc
IST = datetime.timezone(datetime.timedelta(hours=5, minutes=30))


def test_load_metadata_reads_valid_yaml():
    metadata, warnings = load_metadata(
        'title: "X"\ndate: "2025-12-04"\ndraft: false\ntags: ["Kubernetes"]\n'
    )

    assert metadata == {
        "title": "X",
        "date": "2025-12-04",
        "draft": False,
        "tags": ["Kubernetes"],
    }
    assert warnings == []


def test_load_metadata_empty_block_is_empty_mapping():
    assert load_metadata("") == ({}, [])
    assert load_metadata("\n\n") == ({}, [])


def test_load_metadata_recovers_from_stray_quote_in_tags():
    fm = (
        'title: "Inside a Hedge Fund"\n'
        "date: 2024-01-05\n"
        'tags: ["hedge fund", "investment]\n'
        "draft: false\n"
    )

    metadata, warnings = load_metadata(fm)

    assert metadata["title"] == "Inside a Hedge Fund"
    assert metadata["date"] == datetime.date(2024, 1, 5)
    assert metadata["draft"] is False
    assert metadata["tags"] == '["hedge fund", "investment]'
    assert warnings == ["front matter is not valid YAML; decoded line by line"]


def test_load_metadata_keeps_impossible_unquoted_date_as_text():
    metadata, warnings = load_metadata(
        "title: T\ndate: 2025-02-30\ndraft: false\ntags: [a]\n"
    )

    assert metadata == {
        "title": "T",
        "date": "2025-02-30",
        "draft": False,
        "tags": ["a"],
    }
    assert warnings == ["front matter is not valid YAML; decoded line by line"]
    assert parse_date(metadata["date"]) is None


def test_load_metadata_rejects_non_mapping():
    with pytest.raises(ValueError, match=NOT_A_MAPPING):
        load_metadata("- just\n- a list\n")
    with pytest.raises(ValueError, match=NOT_A_MAPPING):
        load_metadata("[unclosed")


def test_parse_lines_groups_indented_lines_under_their_key():
    fm = "title: A: B: [\ntags:\n  - x\n  - y\n# comment\ndraft: true\n"

    result = parse_lines(fm)

    assert result == {"title": "A: B: [", "tags": ["x", "y"], "draft": True}


def test_parse_lines_keeps_impossible_date_as_text():
    result = parse_lines('date: 2025-13-01\ntags: ["x", "y]\n')
    assert result == {"date": "2025-13-01", "tags": '["x", "y]'}


def test_parse_lines_ignores_orphan_continuation_lines():
    assert parse_lines("  - stray\ntitle: T\n") == {"title": "T"}


@pytest.mark.parametrize(
    "value, expected",
    [
        (datetime.date(2025, 12, 4), datetime.datetime(2025, 12, 4, tzinfo=UTC)),
        ("2025-12-04", datetime.datetime(2025, 12, 4, tzinfo=UTC)),
        ("'2025-12-04'", datetime.datetime(2025, 12, 4, tzinfo=UTC)),
        (
            "2025-12-04T10:15:00+05:30",
            datetime.datetime(2025, 12, 4, 10, 15, tzinfo=IST),
        ),
        (
            "2025-12-04T10:15:00.123Z",
            datetime.datetime(2025, 12, 4, 10, 15, 0, 123000, tzinfo=UTC),
        ),
        ("2025-12-04 10:15", datetime.datetime(2025, 12, 4, 10, 15, tzinfo=UTC)),
        ("2025/12/04", datetime.datetime(2025, 12, 4, tzinfo=UTC)),
        ("December 4, 2025", datetime.datetime(2025, 12, 4, tzinfo=UTC)),
        (
            datetime.datetime(2025, 12, 4, 8),
            datetime.datetime(2025, 12, 4, 8, tzinfo=UTC),
        ),
    ],
)
def test_parse_date_accepts_common_formats(value, expected):
    assert parse_date(value) == expected


@pytest.mark.parametrize(
    "value", [None, "", "soon", "2025-13-45", 2025, ["2025-01-01"]]
)
def test_parse_date_rejects_garbage(value):
    assert parse_date(value) is None


def test_parse_date_results_are_always_aware():
    assert parse_date("2025-12-04").tzinfo is not None
    assert parse_date(datetime.date(2025, 1, 1)).tzinfo is not None


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, False),
        (True, True),
        (False, False),
        ("true", True),
        ("False", False),
        ('"yes"', True),
        ("off", False),
        (1, True),
        (0, False),
        ("maybe", None),
        (["x"], None),
    ],
)
def test_parse_draft(value, expected):
    assert parse_draft(value) is expected


def test_parse_tags_keeps_well_formed_list_order():
    assert parse_tags(["a", "b", "c"]) == (["a", "b", "c"], False)


def test_parse_tags_recovers_missing_closing_quote():
    tags, recovered = parse_tags('["hedge fund", "investment]')
    assert tags == ["hedge fund", "investment"]
    assert recovered is True


def test_parse_tags_comma_separated_string():
    assert parse_tags("python, oop , ") == (["python", "oop"], False)


def test_parse_tags_drops_duplicates_and_empties():
    assert parse_tags(["go", "", None, "go", " rust "]) == (["go", "rust"], False)


def test_parse_tags_scalar_and_missing():
    assert parse_tags(2024) == (["2024"], False)
    assert parse_tags(None) == ([], False)


def test_parse_title():
    assert parse_title("  Hello  ") == "Hello"
    assert parse_title(42) == "42"
    assert parse_title("   ") is None
    assert parse_title(None) is None
