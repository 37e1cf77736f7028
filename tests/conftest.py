import asyncio
import copy
from types import SimpleNamespace

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from gridfs.errors import NoFile
from pymongo.errors import DuplicateKeyError, PyMongoError

from vendorhub.api import deps
from vendorhub.main import create_app
from vendorhub.models.user import VerificationStatus
from vendorhub.services.token_service import SessionTokenIssuer

VALID_CODE = "123456"
TEST_SECRET = "test-secret"


# ---------------------------------------------------------------------------
# In-memory MongoDB
# ---------------------------------------------------------------------------

def _matches(document, query):
    for key, expected in (query or {}).items():
        if isinstance(expected, dict) and any(k.startswith("$") for k in expected):
            actual = document.get(key)
            for op, value in expected.items():
                if op == "$ne" and actual == value:
                    return False
                if op == "$in" and actual not in value:
                    return False
        elif document.get(key) != expected:
            return False
    return True


class FakeCursor:
    def __init__(self, documents):
        self._documents = documents

    async def to_list(self, length=None):
        return self._documents if length is None else self._documents[:length]


class FakeCollection:
    """Enough of a Motor collection for the services under test."""

    def __init__(self, name):
        self.name = name
        self.documents = []
        self.unique_fields = set()
        self.indexes = {}

    def _check_unique(self, candidate, ignore=None):
        for field in self.unique_fields:
            for existing in self.documents:
                if existing is ignore:
                    continue
                if field in candidate and existing.get(field) == candidate.get(field):
                    raise DuplicateKeyError(f"E11000 duplicate key error on {self.name}.{field}")

    async def create_index(self, keys, unique=False, name=None, **kwargs):
        if isinstance(keys, str):
            keys = [(keys, 1)]
        self.indexes[name or "_".join(k for k, _ in keys)] = keys
        if unique and len(keys) == 1:
            self.unique_fields.add(keys[0][0])
        return name

    async def find_one(self, query=None):
        for document in self.documents:
            if _matches(document, query):
                return copy.deepcopy(document)
        return None

    def find(self, query=None):
        return FakeCursor([copy.deepcopy(d) for d in self.documents if _matches(d, query)])

    async def insert_one(self, document):
        document.setdefault("_id", ObjectId())
        self._check_unique(document)
        self.documents.append(copy.deepcopy(document))
        return SimpleNamespace(inserted_id=document["_id"], acknowledged=True)

    async def update_one(self, query, update, upsert=False):
        for document in self.documents:
            if _matches(document, query):
                changes = update.get("$set", {})
                modified = any(document.get(k) != v for k, v in changes.items())
                candidate = {**document, **copy.deepcopy(changes)}
                self._check_unique(candidate, ignore=document)
                document.update(copy.deepcopy(changes))
                return SimpleNamespace(matched_count=1, modified_count=int(modified), upserted_id=None)

        if not upsert:
            return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=None)

        document = {
            key: value for key, value in query.items()
            if not isinstance(value, dict)
        }
        document.update(copy.deepcopy(update.get("$set", {})))
        document.update(copy.deepcopy(update.get("$setOnInsert", {})))
        document.setdefault("_id", ObjectId())
        self._check_unique(document)
        self.documents.append(document)
        return SimpleNamespace(matched_count=0, modified_count=0, upserted_id=document["_id"])

    async def delete_one(self, query):
        for index, document in enumerate(self.documents):
            if _matches(document, query):
                del self.documents[index]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)


class FakeDatabase:
    def __init__(self):
        self.collections = {}

    def __getitem__(self, name):
        if name not in self.collections:
            self.collections[name] = FakeCollection(name)
        return self.collections[name]


# ---------------------------------------------------------------------------
# In-memory GridFS
# ---------------------------------------------------------------------------

class FakeGridOut:
    def __init__(self, data, metadata, chunk_size=4):
        self._data = data
        self._offset = 0
        self.metadata = metadata
        self.length = len(data)
        self.chunk_size = chunk_size

    async def readchunk(self):
        chunk = self._data[self._offset:self._offset + self.chunk_size]
        self._offset += len(chunk)
        return chunk


class FakeGridFSBucket:
    def __init__(self):
        self.files = {}
        self.fail_on_upload = None

    async def upload_from_stream(self, filename, source, metadata=None):
        if self.fail_on_upload is not None and len(self.files) == self.fail_on_upload:
            raise PyMongoError("simulated GridFS write failure")
        file_id = ObjectId()
        self.files[file_id] = {"filename": filename, "data": bytes(source), "metadata": metadata or {}}
        return file_id

    async def open_download_stream(self, file_id):
        if file_id not in self.files:
            raise NoFile(f"no file in gridfs collection with _id {file_id!r}")
        stored = self.files[file_id]
        return FakeGridOut(stored["data"], stored["metadata"])


# ---------------------------------------------------------------------------
# OTP provider
# ---------------------------------------------------------------------------

class FakeOTPProvider:
    """Approves VALID_CODE for any number a code was sent to."""

    def __init__(self):
        self.sent = []
        self.checked = []
        self.before_send = None

    async def send_code(self, phone_number, channel=None):
        await asyncio.sleep(0)
        if self.before_send is not None:
            await self.before_send(phone_number)
        self.sent.append((phone_number, channel or "sms"))
        return "pending"

    async def check_code(self, phone_number, code):
        await asyncio.sleep(0)
        self.checked.append((phone_number, code))
        if code == VALID_CODE and any(p == phone_number for p, _ in self.sent):
            return "approved"
        return "pending"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def fake_db():
    db = FakeDatabase()
    db["users"].unique_fields.add("phoneNumber")
    return db


@pytest.fixture
def users(fake_db):
    return fake_db["users"]


@pytest.fixture
def bucket():
    return FakeGridFSBucket()


@pytest.fixture
def otp_provider():
    return FakeOTPProvider()


@pytest.fixture
def token_issuer():
    return SessionTokenIssuer(TEST_SECRET)


@pytest.fixture
def app(fake_db, bucket, otp_provider, token_issuer):
    application = create_app(use_lifespan=False)
    application.dependency_overrides[deps.get_db] = lambda: fake_db
    application.dependency_overrides[deps.get_bucket] = lambda: bucket
    application.dependency_overrides[deps.get_otp_provider] = lambda: otp_provider
    application.dependency_overrides[deps.get_token_issuer] = lambda: token_issuer
    return application


@pytest.fixture
def client(app):
    return TestClient(app)


def make_verified_user(users, phone_number="+15550001", username="alice"):
    """Inserts a verified user row directly and returns it."""
    document = {
        "_id": ObjectId(),
        "phoneNumber": phone_number,
        "username": username,
        "status": VerificationStatus.VERIFIED.value,
    }
    users.documents.append(document)
    return copy.deepcopy(document)


@pytest.fixture
def alice(users):
    return make_verified_user(users, "+15550001", "alice")


@pytest.fixture
def bob(users):
    return make_verified_user(users, "+15550002", "bob")


def auth_header(token_issuer, phone_number):
    return {"Authorization": f"Bearer {token_issuer.issue(phone_number)}"}
