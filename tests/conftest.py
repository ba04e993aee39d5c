import os
import sys
import uuid
from datetime import timedelta
from types import SimpleNamespace

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
# Muss vor dem App-Import gesetzt sein: die Engine entsteht bereits bei db.init_app()
os.environ.setdefault("FLASK_CONFIG", "testing")

from flask_jwt_extended import create_access_token
from sqlalchemy import event
from sqlalchemy.orm import sessionmaker, scoped_session

from app import app as flask_app
from managers.artist_manager import ArtistManager
from managers.event_manager import EventManager
from managers.user_manager import UserManager
from models import db, UserRole, UserStatus, utcnow


def unique_email(prefix="user"):
    return f"{prefix}+{uuid.uuid4().hex[:8]}@example.com"


@pytest.fixture(scope='session')
def app():
    flask_app.config['SERVER_NAME'] = 'localhost'
    flask_app.config['PREFERRED_URL_SCHEME'] = 'http'

    with flask_app.app_context():
        engine = db.engine

        if engine.dialect.name == 'sqlite':
            # pysqlite startet Transaktionen selbst und verträgt sonst keine SAVEPOINTs
            @event.listens_for(engine, "connect")
            def _sqlite_connect(dbapi_connection, connection_record):
                dbapi_connection.isolation_level = None

            @event.listens_for(engine, "begin")
            def _sqlite_begin(conn):
                conn.exec_driver_sql("BEGIN")

        # Eine Connection für die ganze Testsuite
        conn = engine.connect()
        db.metadata.create_all(bind=conn)
        conn.commit()

        flask_app.config['TEST_DB_CONN'] = conn

        yield flask_app

        try:
            db.metadata.drop_all(bind=conn)
            conn.commit()
        finally:
            conn.close()


@pytest.fixture(autouse=True)
def session_transaction(app):
    """
    Pro Test eine äußere Transaktion auf der Connection; die Session arbeitet in
    SAVEPOINTs, sodass auch commit() im Code unter Test am Ende zurückgerollt wird.
    """
    conn = app.config['TEST_DB_CONN']
    outer = conn.begin()

    Session = scoped_session(sessionmaker(bind=conn, join_transaction_mode="create_savepoint"))
    original_session = db.session
    db.session = Session

    try:
        yield Session
    finally:
        Session.remove()
        outer.rollback()
        db.session = original_session


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def user_manager(app):
    return UserManager()


@pytest.fixture
def artist_manager(app):
    return ArtistManager()


@pytest.fixture
def event_manager(app):
    return EventManager()


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def headers_for(identity: str, **claims) -> dict:
    token = create_access_token(identity=identity, additional_claims=claims or None)
    return _bearer(token)


@pytest.fixture
def auth_headers(app):
    """Erzeugt Auth-Header für beliebige Identities (auch ohne internen User)."""
    return headers_for


@pytest.fixture
def make_user(app):
    """
    Legt einen User an und gibt nur id, identity und Auth-Header zurück,
    keine ORM-Objekte (die wären nach dem Request detached).
    """
    def _make(role=UserRole.USER, status=UserStatus.ACTIVE, first_name='Test', last_name='User'):
        identity = f"user-{uuid.uuid4().hex[:8]}"
        user = UserManager().create_user(
            supabase_user_id=identity,
            email=unique_email(identity),
            first_name=first_name,
            last_name=last_name,
            role=role,
            status=status,
        )
        return SimpleNamespace(id=user.id, identity=identity, headers=headers_for(identity))
    return _make


@pytest.fixture
def admin_user(make_user):
    return make_user(role=UserRole.ADMIN, status=UserStatus.ACTIVE, first_name='Ada')


@pytest.fixture
def active_user(make_user):
    return make_user(role=UserRole.USER, status=UserStatus.ACTIVE, first_name='Andrea')


@pytest.fixture
def pending_user(make_user):
    return make_user(role=UserRole.USER, status=UserStatus.PENDING, first_name='Paula')


@pytest.fixture
def blocked_user(make_user):
    return make_user(role=UserRole.USER, status=UserStatus.BLOCKED, first_name='Bruno')


@pytest.fixture
def unregistered_headers(app):
    """Gültiger Token für eine Identity ohne internen User."""
    return headers_for(f"unregistered-{uuid.uuid4().hex[:8]}", email="new.user@example.com")


@pytest.fixture
def make_artist(app):
    def _make(name='Orquesta Típica', genres=('tango',), **kwargs):
        return ArtistManager().create_artist(name=name, genres=list(genres), **kwargs).id
    return _make


@pytest.fixture
def make_event(app, make_artist):
    """
    Legt ein Event an; ``days`` sind Termine relativ zu heute (negativ = Vergangenheit).
    Gibt die Event-ID zurück.
    """
    def _make(title='Noche de Tango', artist_id=None, days=(7,), genre='tango',
              location='Kulturbrauerei, Berlin', time='20:00', images=None):
        if artist_id is None:
            artist_id = make_artist(name=f"Artist {uuid.uuid4().hex[:6]}")
        today = utcnow().replace(hour=20, minute=0, second=0, microsecond=0)
        event = EventManager().create_event(
            title=title,
            artist_id=artist_id,
            dates=[today + timedelta(days=d) for d in days],
            location=location,
            time=time,
            genre=genre,
            price=12.5,
            images=images,
        )
        return event.id
    return _make
