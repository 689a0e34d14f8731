"""
Office catalog contents and validation of category/office/level combinations.
"""
from collections import Counter

import pytest

from app.features.offices.catalog import (
    EXECUTIVE_OFFICES,
    SENATE_PRINCIPAL_OFFICES,
    RoleCategory,
    default_restrictions,
    flag_for,
    iter_catalog,
    post_title,
    validate_entry,
)
from app.features.offices.errors import ValidationError


def test_catalog_sizes_per_category():
    counts = Counter(entry.category for entry in iter_catalog())
    assert counts[RoleCategory.EXECUTIVE] == 10
    assert counts[RoleCategory.SENATE] == 4 + 15
    assert counts[RoleCategory.CLASS_REP] == 15


def test_catalog_has_no_duplicate_identities():
    keys = [(e.category, e.office, e.level) for e in iter_catalog()]
    assert len(keys) == len(set(keys))


def test_senator_seats_are_titled_per_level():
    seats = [e for e in iter_catalog() if e.category is RoleCategory.SENATE and e.level != "All"]
    assert {e.office for e in seats if e.level == "200"} == {
        "200L Senator 1", "200L Senator 2", "200L Senator 3",
    }
    assert all(e.office.startswith(f"{e.level}L Senator ") for e in seats)


def test_executive_and_senate_principal_offices_are_level_all():
    levels = {}
    for entry in iter_catalog():
        levels.setdefault((entry.category, entry.office), []).append(entry.level)
    for office in EXECUTIVE_OFFICES:
        assert levels[(RoleCategory.EXECUTIVE, office)] == ["All"]
    for office in SENATE_PRINCIPAL_OFFICES:
        assert levels[(RoleCategory.SENATE, office)] == ["All"]
    assert sum(1 for e in iter_catalog() if e.level == "All") == len(EXECUTIVE_OFFICES) + len(SENATE_PRINCIPAL_OFFICES)


def test_default_restrictions_are_mutual_between_executive_and_senate():
    assert default_restrictions(RoleCategory.EXECUTIVE) == ["Senate"]
    assert default_restrictions(RoleCategory.SENATE) == ["Executive"]
    assert default_restrictions(RoleCategory.CLASS_REP) == []


def test_class_rep_has_no_flag():
    assert flag_for(RoleCategory.EXECUTIVE) == "is_executive"
    assert flag_for(RoleCategory.SENATE) == "is_senator"
    assert flag_for(RoleCategory.CLASS_REP) is None


def test_post_title_format():
    assert post_title(RoleCategory.EXECUTIVE, "Treasurer") == "Executive - Treasurer"
    assert post_title("ClassRep", "Class Representative") == "ClassRep - Class Representative"


def test_validate_entry_defaults_executive_level():
    entry = validate_entry("Executive", " President ")
    assert entry.level == "All"
    assert entry.office == "President"


@pytest.mark.parametrize(
    "category, office, level",
    [
        ("Senate", "300L Senator 2", "300"),
        ("Senate", "Clerk", "All"),
        ("ClassRep", "Assistant Class Representative (Admin)", "500"),
    ],
)
def test_validate_entry_accepts_catalog_offices(category, office, level):
    assert validate_entry(category, office, level).office == office


@pytest.mark.parametrize(
    "category, office, level",
    [
        ("Guild", "President", "All"),
        ("Executive", "Chancellor", "All"),
        ("Executive", "President", "100"),
        ("Senate", "300L Senator 2", "200"),
        ("Senate", "300L Senator 4", "300"),
        ("Senate", "Clerk", "100"),
        ("Senate", "Clerk", None),
        ("ClassRep", "Class Representative", "All"),
        ("ClassRep", "Class Representative", "600"),
    ],
)
def test_validate_entry_rejects_combinations_outside_catalog(category, office, level):
    with pytest.raises(ValidationError):
        validate_entry(category, office, level)
