import copy
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from google.api_core import exceptions as google_exceptions

from config import Settings
from main import create_app
from models.base import Photo
from services.content_store import ContentStore
from services.errors import NotificationFailure
from services.notifications import NotificationDispatcher
from services.report_repository import ReportRepository

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


# ----------------------------------------------------------------------
# Firestore en memoria (solo lo que usa ContentStore)
# ----------------------------------------------------------------------
def _lookup(data, path):
    for part in path.split("."):
        if not isinstance(data, dict):
            return None
        data = data.get(part)
    return data


class FakeSnapshot:
    def __init__(self, data):
        self._data = data

    @property
    def exists(self):
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data)


class FakeDocumentRef:
    def __init__(self, db, collection, doc_id):
        self.db = db
        self.collection = collection
        self.id = doc_id

    def _docs(self):
        return self.db.data.setdefault(self.collection, {})

    def get(self):
        return FakeSnapshot(self._docs().get(self.id))

    def set(self, data):
        self.db.writes.append(("set", self.collection, self.id))
        self._docs()[self.id] = copy.deepcopy(data)

    def update(self, changes):
        if self.id not in self._docs():
            raise google_exceptions.NotFound(f"No document to update: {self.id}")
        self.db.writes.append(("update", self.collection, self.id))
        document = self._docs()[self.id]
        for path, value in changes.items():
            target = document
            parts = path.split(".")
            for part in parts[:-1]:
                target = target.setdefault(part, {})
            target[parts[-1]] = copy.deepcopy(value)


class FakeQuery:
    def __init__(self, db, collection, filters=(), limit=None):
        self.db = db
        self.collection = collection
        self.filters = filters
        self._limit = limit

    def where(self, filter):
        return FakeQuery(self.db, self.collection, self.filters + (filter,), self._limit)

    def limit(self, count):
        return FakeQuery(self.db, self.collection, self.filters, count)

    def stream(self):
        matches = [
            FakeSnapshot(data)
            for data in self.db.data.get(self.collection, {}).values()
            if all(_lookup(data, f.field_path) == f.value for f in self.filters)
        ]
        return iter(matches[: self._limit] if self._limit else matches)


class FakeCollection(FakeQuery):
    def document(self, doc_id):
        return FakeDocumentRef(self.db, self.collection, doc_id)


class FakeFirestore:
    def __init__(self):
        self.data = {}
        self.writes = []
        self.error = None

    def collection(self, name):
        if self.error is not None:
            raise self.error
        return FakeCollection(self, name)


# ----------------------------------------------------------------------
# Dobles de correo y media
# ----------------------------------------------------------------------
class RecordingMailer:
    def __init__(self, enabled=True, fail=False):
        self.enabled = enabled
        self.fail = fail
        self.sent = []

    def send_email(self, to_email, subject, body):
        if self.fail:
            raise NotificationFailure(f"No se pudo enviar el correo a {to_email}")
        self.sent.append({"to": to_email, "subject": subject, "body": body})


class FakeMediaClient:
    def __init__(self, photo=None):
        self.photo = photo
        self.uploads = []

    def upload_photo(self, file, filename):
        self.uploads.append(filename)
        return self.photo


# ----------------------------------------------------------------------
# Helpers para sembrar datos
# ----------------------------------------------------------------------
def seed_object(db, object_type, metadata, title="Seeded", created_at=NOW, object_id=None):
    object_id = object_id or uuid.uuid4().hex
    document = {
        "id": object_id,
        "slug": f"{title.lower().replace(' ', '-')}-{object_id[:8]}",
        "title": title,
        "type": object_type,
        "metadata": metadata,
        "created_at": created_at,
        "modified_at": created_at,
    }
    db.collection(object_type).document(object_id).set(document)
    return document


def report_metadata(**overrides):
    metadata = {
        "description": "Broken streetlight on Elm St",
        "category": "streetlights",
        "priority": "high",
        "status": "reported",
        "location_coordinates": [40.0, -74.0],
        "location_address": "",
        "reporter_email": "resident@example.com",
        "reporter_name": "",
        "reporter_phone": "",
        "department": "Electrical Services",
    }
    metadata.update(overrides)
    return metadata


def seed_report(db, title="Seeded report", days_ago=0, **overrides):
    return seed_object(
        db,
        "issue-reports",
        report_metadata(**overrides),
        title=title,
        created_at=NOW - timedelta(days=days_ago),
    )


# ----------------------------------------------------------------------
# Fixtures
# ----------------------------------------------------------------------
@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def firestore_db():
    return FakeFirestore()


@pytest.fixture
def store(firestore_db, clock):
    return ContentStore(firestore_db, clock=clock)


@pytest.fixture
def repository(store, clock):
    return ReportRepository(store, clock=clock)


@pytest.fixture
def mailer():
    return RecordingMailer()


@pytest.fixture
def dispatcher(mailer):
    return NotificationDispatcher(mailer)


@pytest.fixture
def media():
    return FakeMediaClient(
        photo=Photo(url="https://res.cloudinary.com/demo/photo.jpg",
                    display_url="https://res.cloudinary.com/demo/w_1200/photo.jpg")
    )


@pytest.fixture
def client(repository, dispatcher, media, clock):
    app = create_app(
        settings=Settings(),
        repository=repository,
        dispatcher=dispatcher,
        media=media,
        clock=clock,
    )
    return TestClient(app)
