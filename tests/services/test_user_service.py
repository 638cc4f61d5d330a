"""
Tests for kosrent/services/user_service.py
"""
import pytest
from datetime import date

from kosrent.exceptions import Conflict, Forbidden, Unauthorized
from kosrent.models.ontology import Booking, BookingStatus, Room, RoomStatus, User, UserRole
from kosrent.models.schemas import BookingCreate, UserCreate, UserUpdate
from kosrent.security.auth import decode_token, verify_password
from kosrent.services.booking_service import BookingService
from kosrent.services.user_service import UserService


def _register(db, email="dewi@example.com", phone="081255550000", role="society"):
    return UserService(db).register(UserCreate(
        name="Dewi", email=email, phone_number=phone, password="rahasia", role=role
    ))


class TestRegister:

    def test_register(self, db_session):
        user = _register(db_session)
        assert user.role == UserRole.SOCIETY
        assert user.password_hash != "rahasia"
        assert verify_password("rahasia", user.password_hash)

    def test_duplicate_email(self, db_session):
        _register(db_session)
        with pytest.raises(Conflict):
            _register(db_session, phone="081255550001")

    def test_duplicate_phone(self, db_session):
        _register(db_session)
        with pytest.raises(Conflict):
            _register(db_session, email="lain@example.com")


class TestAuthenticate:

    def test_login(self, db_session):
        user = _register(db_session, role="OWNER")
        result = UserService(db_session).authenticate("dewi@example.com", "rahasia")
        payload = decode_token(result["access_token"])
        assert payload["sub"] == str(user.id)
        assert payload["role"] == "OWNER"
        assert result["user"].email == "dewi@example.com"

    def test_wrong_password(self, db_session):
        _register(db_session)
        with pytest.raises(Unauthorized):
            UserService(db_session).authenticate("dewi@example.com", "salah")

    def test_unknown_email(self, db_session):
        with pytest.raises(Unauthorized):
            UserService(db_session).authenticate("siapa@example.com", "rahasia")


class TestUpdate:

    def test_update_self(self, db_session, renter):
        user = UserService(db_session).update_user(
            renter.id, UserUpdate(name="Andi P.", password="baru123"), renter
        )
        assert user.name == "Andi P."
        assert verify_password("baru123", user.password_hash)

    def test_update_other(self, db_session, renter, other_renter):
        with pytest.raises(Forbidden):
            UserService(db_session).update_user(other_renter.id, UserUpdate(name="X"), renter)

    def test_update_to_taken_email(self, db_session, renter, other_renter):
        with pytest.raises(Conflict):
            UserService(db_session).update_user(
                renter.id, UserUpdate(email=other_renter.email), renter
            )

    def test_search(self, db_session, owner, renter):
        svc = UserService(db_session)
        assert [u.id for u in svc.get_users(search="Andi")] == [renter.id]
        assert [u.id for u in svc.get_users(role=UserRole.OWNER)] == [owner.id]


class TestDelete:

    def _confirmed(self, db, room, renter, owner, start=date(2024, 1, 1), end=date(2024, 1, 31)):
        bookings = BookingService(db)
        booking = bookings.create_booking(
            BookingCreate(room_id=room.id, start_date=start, end_date=end), renter
        )
        return bookings.set_status(booking.id, BookingStatus.CONFIRMED, owner)

    def test_delete_renter_releases_occupied_room(self, db_session, sample_room, sample_kos,
                                                  renter, other_renter, owner):
        self._confirmed(db_session, sample_room, renter, owner)
        db_session.refresh(sample_room)
        assert sample_room.status == RoomStatus.OCCUPIED

        deleted = UserService(db_session).delete_user(renter.id, owner)

        assert deleted.id == renter.id
        assert db_session.get(User, renter.id) is None
        assert db_session.query(Booking).count() == 0
        room = db_session.get(Room, sample_room.id)
        assert room.status == RoomStatus.AVAILABLE
        db_session.refresh(sample_kos)
        assert sample_kos.available_rooms == 1

        booking = BookingService(db_session).create_booking(
            BookingCreate(room_id=sample_room.id, start_date=date(2024, 1, 1),
                          end_date=date(2024, 1, 31)),
            other_renter
        )
        assert booking.status == BookingStatus.PENDING

    def test_room_held_by_another_renter_stays_occupied(self, db_session, sample_room, sample_kos,
                                                        renter, other_renter, owner):
        self._confirmed(db_session, sample_room, renter, owner)
        self._confirmed(db_session, sample_room, other_renter, owner,
                        date(2024, 2, 1), date(2024, 3, 1))

        UserService(db_session).delete_user(renter.id, owner)

        room = db_session.get(Room, sample_room.id)
        assert room.status == RoomStatus.OCCUPIED
        db_session.refresh(sample_kos)
        assert sample_kos.available_rooms == 0
        assert db_session.query(Booking).count() == 1

    def test_delete_without_bookings(self, db_session, renter, owner):
        UserService(db_session).delete_user(renter.id, owner)
        assert db_session.get(User, renter.id) is None
