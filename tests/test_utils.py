from datetime import date, datetime

import pytest

from crisma.utils import PickerItem, SearchablePicker, format_date, group_label


@pytest.mark.parametrize(
    "start, label",
    [
        ("2025-01-12", "2025 1st Semester"),
        ("2025-06-30", "2025 1st Semester"),
        ("2025-07-01", "2025 2nd Semester"),
        (date(2024, 12, 1), "2024 2nd Semester"),
    ],
)
def test_group_label(start, label):
    assert group_label(start) == label


def test_format_date():
    assert format_date("2025-03-05") == "March 5, 2025"
    assert format_date(datetime(2024, 11, 20, 18, 30)) == "November 20, 2024"
    assert format_date(None) == "N/A"
    assert format_date("") == "N/A"


def test_picker_filters_by_name_and_selects_by_id():
    picker = SearchablePicker([PickerItem(1, "Joana Lima"), PickerItem(2, "Rui Nunes")])
    picker.query = "NUN"
    assert [o.id for o in picker.options] == [2]

    # a fresh copy with the same id still resolves
    assert picker.select(1) == PickerItem(1, "Joana Lima")
    assert picker.select(99) is None
    assert picker.selected is None


def test_empty_query_shows_everything():
    items = [PickerItem(1, "A"), PickerItem(2, "B")]
    assert SearchablePicker(items).options == items
