"""
Tests for kosrent/services/facility_service.py
"""
import pytest

from kosrent.exceptions import Forbidden, NotFound
from kosrent.models.ontology import Facility, FacilityType
from kosrent.models.schemas import KosFacilityCreate, RoomFacilityCreate, FacilityUpdate
from kosrent.services.facility_service import FacilityService


class TestFacilities:

    def test_kos_facility(self, db_session, sample_kos, owner):
        svc = FacilityService(db_session)
        facility = svc.create_kos_facility(
            KosFacilityCreate(kos_id=sample_kos.id, name="WiFi", description="100 Mbps"), owner
        )
        assert facility.facility_type == FacilityType.KOS_FACILITY
        assert facility.kos_id == sample_kos.id
        assert facility.room_id is None
        assert [f.name for f in svc.get_kos_facilities(sample_kos.id)] == ["WiFi"]

    def test_room_facility(self, db_session, sample_room, owner):
        svc = FacilityService(db_session)
        facility = svc.create_room_facility(
            RoomFacilityCreate(room_id=sample_room.id, name="AC", description="1 PK"), owner
        )
        assert facility.facility_type == FacilityType.ROOM_FACILITY
        assert facility.kos_id is None
        assert [f.name for f in svc.get_room_facilities(sample_room.id)] == ["AC"]

    def test_other_owner_cannot_add(self, db_session, sample_kos, sample_room, other_owner):
        svc = FacilityService(db_session)
        with pytest.raises(Forbidden):
            svc.create_kos_facility(
                KosFacilityCreate(kos_id=sample_kos.id, name="WiFi", description=""), other_owner
            )
        with pytest.raises(Forbidden):
            svc.create_room_facility(
                RoomFacilityCreate(room_id=sample_room.id, name="AC", description=""), other_owner
            )

    def test_missing_parent(self, db_session, owner):
        with pytest.raises(NotFound):
            FacilityService(db_session).create_room_facility(
                RoomFacilityCreate(room_id=999, name="AC", description=""), owner
            )

    def test_update_and_delete(self, db_session, sample_room, owner, other_owner):
        svc = FacilityService(db_session)
        facility = svc.create_room_facility(
            RoomFacilityCreate(room_id=sample_room.id, name="AC", description=""), owner
        )

        with pytest.raises(Forbidden):
            svc.update_facility(facility.id, FacilityUpdate(name="Kipas"), other_owner)

        updated = svc.update_facility(facility.id, FacilityUpdate(icon="ac.png"), owner)
        assert updated.icon == "ac.png"
        assert updated.name == "AC"

        deleted = svc.delete_facility(facility.id, owner)
        assert deleted.id == facility.id
        assert db_session.query(Facility).count() == 0
