import datetime

import pytest

from database import init_db, make_session_factory
from models import Reminder, User
from notifications import Dispatcher
from store import ReminderStore

NOW = datetime.datetime(2025, 3, 14, 9, 0, 0)


class RecordingTransport:
    """Records every send; raises the queued error for a given address, if any."""

    def __init__(self):
        self.sent = []
        self.errors = {}

    async def send(self, address, notification):
        self.sent.append((address, notification))
        error = self.errors.get(address)
        if error is not None:
            raise error


@pytest.fixture
def session_factory(tmp_path):
    factory = make_session_factory(f"sqlite:///{tmp_path / 'test.db'}")
    init_db(factory)
    return factory


@pytest.fixture
def store(session_factory):
    return ReminderStore(session_factory)


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def dispatcher(transport):
    return Dispatcher(transport)


@pytest.fixture
def add_user(session_factory):
    def _add(email="alice@example.com", full_name="Alice"):
        db = session_factory()
        user = User(email=email, full_name=full_name)
        db.add(user)
        db.commit()
        db.close()
        return user.id
    return _add


@pytest.fixture
def add_reminder(session_factory):
    def _add(user_id, title="Call Bob", due_in=datetime.timedelta(minutes=2), notified=None):
        db = session_factory()
        reminder = Reminder(user_id=user_id, title=title, due_at=NOW + due_in, notified=notified)
        db.add(reminder)
        db.commit()
        db.close()
        return reminder.id
    return _add


@pytest.fixture
def get_reminder(session_factory):
    def _get(reminder_id):
        db = session_factory()
        try:
            return db.get(Reminder, reminder_id)
        finally:
            db.close()
    return _get


@pytest.fixture
def now():
    return NOW
