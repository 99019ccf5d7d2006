from src.substitution.filtering import apply_filter, filter_rows, parse_group_input
from src.substitution.models import Row, TimetablePayload


def _rows(*groups):
    return [Row(group=g, data=[str(i), "M", "101", "ABC", ""]) for i, g in enumerate(groups)]


def test_no_filter_returns_all_rows():
    rows = _rows("11a", "12", None)

    assert filter_rows(rows, None) == rows
    assert filter_rows(rows, []) == rows
    assert filter_rows(rows, frozenset()) == rows


def test_keeps_only_matching_groups_in_order():
    rows = _rows("12", "11a", "10b", "11a", "12")

    result = filter_rows(rows, {"11a", "12"})

    assert [row.group for row in result] == ["12", "11a", "11a", "12"]
    assert [row.data[0] for row in result] == ["0", "1", "3", "4"]


def test_matching_is_exact():
    rows = _rows("11a", "11A", "11", " 11a")

    assert [row.group for row in filter_rows(rows, ["11a"])] == ["11a"]


def test_filter_that_matches_nothing_returns_empty():
    assert filter_rows(_rows("11a", "12"), ["5c"]) == []


def test_apply_filter_keeps_absent_elements_unfiltered():
    payload = TimetablePayload.model_validate(
        {
            "rows": [r.model_dump(by_alias=True) for r in _rows("11a", "12")],
            "absentElements": [
                {"elementName": "ABC", "absences": [{"type": "ill"}]},
                {"elementName": "XYZ", "absences": []},
            ],
            "lastUpdate": "08:00",
        }
    )

    result = apply_filter(payload, {"12"})

    assert [row.group for row in result.rows] == ["12"]
    assert [e.element_name for e in result.absent_elements] == ["ABC", "XYZ"]
    assert result.last_update == "08:00"
    assert len(payload.rows) == 2


def test_parse_group_input():
    assert parse_group_input("11a, 12 ,,13") == {"11a", "12", "13"}
    assert parse_group_input("   ") == frozenset()


def test_single_group_string_matches_exactly():
    rows = _rows("11a", "1", "12")

    assert [row.group for row in filter_rows(rows, "1")] == ["1"]
