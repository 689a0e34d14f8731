"""
Assignment ledger behaviour on in-memory roles (no database needed).
"""
from datetime import datetime, timezone

import pytest

from app.features.offices import ledger
from app.features.offices.catalog import RoleCategory, default_restrictions
from app.features.offices.errors import NoActiveAssignmentError
from app.features.offices.models import Role
from app.features.students.models import Student


def _role(category=RoleCategory.EXECUTIVE, office="Treasurer", level="All"):
    return Role(
        id="01ROLE",
        category=category,
        office=office,
        level=level,
        permissions=[],
        restrictions=default_restrictions(category),
        assignment_history=[],
    )


def _student(student_id, matric_number, first_name="Ada", last_name="Obi"):
    return Student(
        id=student_id,
        matric_number=matric_number,
        first_name=first_name,
        last_name=last_name,
        posts=[],
    )


def _active_per_session(role):
    sessions = [r.academic_session for r in role.assignment_history if r.is_active]
    return {s: sessions.count(s) for s in sessions}


def test_assignment_on_vacant_role_snapshots_student():
    role = _role()
    ada = _student("S1", "CSC/001")

    displaced = ledger.record_assignment(role, ada, "2024/25")

    assert displaced == []
    record = role.assignment_history[-1]
    assert (record.student_id, record.matric_number, record.full_name) == ("S1", "CSC/001", "Ada Obi")
    assert record.is_active and record.handover_at is None
    assert role.current_assignment_id == "S1"
    assert role.current_academic_session == "2024/25"


def test_reassignment_hands_the_office_over():
    role = _role()
    ada, ben = _student("S1", "CSC/001"), _student("S2", "CSC/002", "Ben", "Eze")
    ledger.record_assignment(role, ada, "2024/25")
    handover = datetime(2025, 1, 10, tzinfo=timezone.utc)

    displaced = ledger.record_assignment(role, ben, "2024/25", when=handover)

    first, second = role.assignment_history
    assert displaced == [first]
    assert not first.is_active and first.handover_at == handover
    assert second.is_active and second.student_id == "S2"
    assert role.current_assignment_id == "S2"
    assert _active_per_session(role) == {"2024/25": 1}


def test_assignment_for_a_new_session_ends_the_previous_tenure():
    role = _role()
    ledger.record_assignment(role, _student("S1", "CSC/001"), "2023/24")
    ledger.record_assignment(role, _student("S2", "CSC/002"), "2024/25")

    assert [r.is_active for r in role.assignment_history] == [False, True]
    assert role.current_academic_session == "2024/25"


def test_handover_date_is_set_only_once():
    role = _role()
    ledger.record_assignment(role, _student("S1", "CSC/001"), "2024/25")
    record = role.assignment_history[0]
    first = datetime(2025, 1, 1, tzinfo=timezone.utc)

    record.deactivate(first)
    record.deactivate(datetime(2025, 6, 1, tzinfo=timezone.utc))

    assert record.handover_at == first


def test_snapshot_fields_are_immutable():
    role = _role()
    ledger.record_assignment(role, _student("S1", "CSC/001"), "2024/25")
    record = role.assignment_history[0]

    with pytest.raises(ValueError):
        record.full_name = "Someone Else"
    with pytest.raises(ValueError):
        record.academic_session = "2025/26"


def test_removal_deactivates_and_clears_current_pointers():
    role = _role()
    ledger.record_assignment(role, _student("S1", "CSC/001"), "2024/25")

    ended = ledger.record_removal(role, "S1", "2024/25")

    assert len(ended) == 1 and not ended[0].is_active
    assert ended[0].handover_at is not None
    assert role.current_assignment_id is None
    assert role.current_academic_session is None
    assert len(role.assignment_history) == 1


@pytest.mark.parametrize("student_id, session", [("S2", "2024/25"), ("S1", "2023/24")])
def test_removal_without_matching_active_record_fails(student_id, session):
    role = _role()
    ledger.record_assignment(role, _student("S1", "CSC/001"), "2024/25")

    with pytest.raises(NoActiveAssignmentError):
        ledger.record_removal(role, student_id, session)

    assert role.current_assignment_id == "S1"


def test_removing_from_vacant_role_fails():
    role = _role()
    ledger.record_assignment(role, _student("S1", "CSC/001"), "2024/25")
    ledger.record_removal(role, "S1", "2024/25")

    with pytest.raises(NoActiveAssignmentError):
        ledger.record_removal(role, "S1", "2024/25")


def test_history_filters_by_session():
    role = _role()
    ledger.record_assignment(role, _student("S1", "CSC/001"), "2023/24")
    ledger.record_assignment(role, _student("S2", "CSC/002"), "2024/25")
    ledger.record_assignment(role, _student("S3", "CSC/003"), "2024/25")

    assert [r.student_id for r in ledger.history(role, "2024/25")] == ["S2", "S3"]
    assert len(ledger.history(role)) == 3
    assert ledger.active_record(role).student_id == "S3"
    assert ledger.active_record(role, "2023/24") is None
