"""
Pytest configuration and shared fixtures
"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from kosrent.database import Base, get_db, build_engine
from kosrent.models import ontology  # noqa: F401
from kosrent.models.ontology import User, UserRole, Kos, Room, RoomStatus, GenderType
from kosrent.routers.bookings import get_invoice_renderer
from kosrent.security.auth import get_password_hash, create_access_token
from kosrent.services.invoice_service import InvoiceRenderer
from kosrent.main import app


@pytest.fixture(scope="function")
def db_engine():
    """In-memory database engine"""
    engine = build_engine("sqlite:///:memory:", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Database session"""
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def invoice_dir(tmp_path):
    return tmp_path / "invoices"


@pytest.fixture(scope="function")
def client(db_session, invoice_dir):
    """Test client bound to the test session"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_invoice_renderer] = lambda: InvoiceRenderer(str(invoice_dir))
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ============== Users ==============

def make_user(db, name, email, phone_number, role, password="secret"):
    user = User(
        name=name,
        email=email,
        phone_number=phone_number,
        password_hash=get_password_hash(password),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def bearer(user):
    return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}


@pytest.fixture
def owner(db_session):
    """Kos owner"""
    return make_user(db_session, "Bu Sri", "sri@example.com", "081200000001", UserRole.OWNER)


@pytest.fixture
def other_owner(db_session):
    """Owner of nothing in the sample data"""
    return make_user(db_session, "Pak Budi", "budi@example.com", "081200000002", UserRole.OWNER)


@pytest.fixture
def renter(db_session):
    """Renter (SOCIETY role)"""
    return make_user(db_session, "Andi", "andi@example.com", "081200000003", UserRole.SOCIETY)


@pytest.fixture
def other_renter(db_session):
    return make_user(db_session, "Rina", "rina@example.com", "081200000004", UserRole.SOCIETY)


@pytest.fixture
def owner_headers(owner):
    return bearer(owner)


@pytest.fixture
def other_owner_headers(other_owner):
    return bearer(other_owner)


@pytest.fixture
def renter_headers(renter):
    return bearer(renter)


@pytest.fixture
def other_renter_headers(other_renter):
    return bearer(other_renter)


# ============== Listings ==============

@pytest.fixture
def sample_kos(db_session, owner):
    """Kos without rooms"""
    kos = Kos(
        name="Kos Melati",
        address="Jl. Melati No. 5, Malang",
        description="Dekat kampus",
        rules="Tidak boleh merokok",
        gender_type=GenderType.FEMALE_ONLY,
        owner_id=owner.id,
        total_rooms=0,
        available_rooms=0,
    )
    db_session.add(kos)
    db_session.commit()
    db_session.refresh(kos)
    return kos


@pytest.fixture
def sample_room(db_session, sample_kos):
    """AVAILABLE room at 900000 a month, counted in its kos"""
    room = Room(
        kos_id=sample_kos.id,
        room_number="A1",
        tipe="Standard",
        harga=900000,
        status=RoomStatus.AVAILABLE,
    )
    db_session.add(room)
    sample_kos.total_rooms = 1
    sample_kos.available_rooms = 1
    db_session.commit()
    db_session.refresh(room)
    return room
