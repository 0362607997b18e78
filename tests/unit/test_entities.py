"""Pruebas unitarias de las entidades de dominio."""

from datetime import datetime, timedelta, timezone

import pytest

from keydesk.domain.entities import Key, Reservation, ReservationStatus, User, UserRole
from keydesk.domain.errors import (
    CannotExtendReservationError,
    InvalidDueTimeError,
    ReservationNotActiveError,
    ValidationError,
)
from keydesk.domain.validation import ValidationPolicy

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _reservation(**overrides) -> Reservation:
    values = {
        "id": "res-1",
        "key_id": "key-1",
        "user_id": "user-1",
        "reserved_at": NOW,
        "due_at": NOW + timedelta(hours=2),
    }
    values.update(overrides)
    return Reservation(**values)


class TestKey:
    def test_only_active_keys_can_be_reserved(self):
        assert Key(name="Terraza").can_be_reserved()
        assert not Key(name="Terraza", is_active=False).can_be_reserved()

    def test_apply_changes_keeps_identity_and_creation_time(self):
        key = Key(id="key-1", name="Terraza", created_at=NOW, updated_at=NOW)
        later = NOW + timedelta(minutes=5)

        key.apply_changes(name="Azotea", description="Piso 12", is_active=False, now=later)

        assert key.id == "key-1"
        assert key.created_at == NOW
        assert key.updated_at == later
        assert (key.name, key.description, key.is_active) == ("Azotea", "Piso 12", False)

    def test_validate_rejects_short_name(self):
        with pytest.raises(ValidationError) as exc_info:
            Key(name="A").validate(ValidationPolicy())
        assert exc_info.value.field == "name"

    def test_naive_timestamps_are_read_as_utc(self):
        key = Key(name="Terraza", created_at=datetime(2026, 3, 1, 12, 0))
        assert key.created_at == NOW


class TestUser:
    def test_blocked_user_cannot_reserve(self):
        user = User(name="Ana", email="ana@building.com")
        assert user.can_make_reservation()

        user.block(NOW)

        assert user.is_blocked
        assert not user.can_make_reservation()
        assert user.updated_at == NOW

    def test_unblock_restores_reservation_rights(self):
        user = User(name="Ana", email="ana@building.com", is_blocked=True)
        user.unblock(NOW)
        assert user.can_make_reservation()

    def test_role_is_coerced_from_string(self):
        user = User(name="Root", email="root@building.com", role="admin")
        assert user.role is UserRole.ADMIN
        assert user.is_admin

    def test_password_hash_not_in_repr(self):
        user = User(name="Ana", email="ana@building.com", password_hash="$2b$secret")
        assert "$2b$secret" not in repr(user)


class TestReservation:
    def test_due_at_equal_to_now_is_rejected(self):
        with pytest.raises(ValidationError):
            _reservation(due_at=NOW).validate_for_creation(NOW)

    def test_due_at_one_second_after_now_is_accepted(self):
        _reservation(due_at=NOW + timedelta(seconds=1)).validate_for_creation(NOW)

    def test_missing_key_id_is_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            _reservation(key_id="").validate_for_creation(NOW)
        assert exc_info.value.field == "key_id"

    def test_is_overdue_only_strictly_after_due(self):
        reservation = _reservation()
        assert not reservation.is_overdue(reservation.due_at)
        assert reservation.is_overdue(reservation.due_at + timedelta(microseconds=1))

    def test_overdue_time(self):
        reservation = _reservation()
        assert reservation.overdue_time(NOW) == timedelta(0)
        assert reservation.overdue_time(reservation.due_at + timedelta(minutes=30)) == timedelta(minutes=30)

    def test_returned_reservation_is_never_overdue(self):
        reservation = _reservation()
        reservation.mark_as_returned(NOW + timedelta(hours=1))
        assert not reservation.is_overdue(NOW + timedelta(days=1))

    def test_mark_as_returned(self):
        reservation = _reservation()
        returned_at = NOW + timedelta(hours=1)

        reservation.mark_as_returned(returned_at)

        assert reservation.status == ReservationStatus.RETURNED
        assert reservation.returned_at == returned_at
        reservation.validate_return_time()

    def test_return_before_reserved_at_leaves_reservation_untouched(self):
        reservation = _reservation()
        with pytest.raises(ValidationError):
            reservation.mark_as_returned(NOW - timedelta(seconds=1))
        assert reservation.status == ReservationStatus.ACTIVE
        assert reservation.returned_at is None

    def test_transitions_are_one_way(self):
        reservation = _reservation()
        reservation.mark_as_overdue(NOW + timedelta(hours=3))

        with pytest.raises(ReservationNotActiveError):
            reservation.mark_as_returned(NOW + timedelta(hours=4))
        with pytest.raises(ReservationNotActiveError):
            reservation.mark_as_overdue(NOW + timedelta(hours=4))

    def test_extend_accepts_same_due_at(self):
        reservation = _reservation()
        reservation.extend(reservation.due_at, NOW)
        assert reservation.due_at == NOW + timedelta(hours=2)

    def test_extend_rejects_earlier_due_at(self):
        reservation = _reservation()
        with pytest.raises(InvalidDueTimeError) as exc_info:
            reservation.extend(reservation.due_at - timedelta(minutes=1), NOW)
        assert exc_info.value.code == "INVALID_DUE_TIME"
        assert reservation.due_at == NOW + timedelta(hours=2)

    def test_extend_rejects_inactive(self):
        reservation = _reservation(status=ReservationStatus.RETURNED)
        with pytest.raises(CannotExtendReservationError):
            reservation.extend(NOW + timedelta(days=1), NOW)

    def test_validate_return_time(self):
        reservation = _reservation(returned_at=NOW - timedelta(minutes=1))
        with pytest.raises(ValidationError):
            reservation.validate_return_time()
