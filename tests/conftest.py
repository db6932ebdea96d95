"""
Pytest configuration and fixtures.

Provides:
- InMemoryStore: dict-backed KVStore double with Redis range semantics
- repositories / service wired to the double
- FastAPI TestClient with an admin token configured
"""
import os
import tempfile

os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="event_site_logs_"))

import pytest
from fastapi.testclient import TestClient

from event_site.core.config import Settings
from event_site.db.base import KVStore
from event_site.services.content_service import ContentRepository
from event_site.services.registration_repository import RegistrationRepository
from event_site.services.registration_service import RegistrationService

ADMIN_TOKEN = "s3cret-token"


class InMemoryStore(KVStore):
    """Dict-backed store for tests."""

    def __init__(self):
        self.strings = {}
        self.hashes = {}
        self.zsets = {}

    def ping(self):
        return True

    def get(self, key):
        return self.strings.get(key)

    def set(self, key, value):
        self.strings[key] = str(value)
        return True

    def delete(self, *keys):
        removed = 0
        for key in keys:
            for bucket in (self.strings, self.hashes, self.zsets):
                if key in bucket:
                    del bucket[key]
                    removed += 1
        return removed

    def hset(self, key, mapping):
        bucket = self.hashes.setdefault(key, {})
        added = len([f for f in mapping if f not in bucket])
        bucket.update({f: str(v) for f, v in mapping.items()})
        return added

    def hgetall(self, key):
        return dict(self.hashes.get(key, {}))

    def zadd(self, key, mapping):
        zset = self.zsets.setdefault(key, {})
        added = len([m for m in mapping if m not in zset])
        zset.update({m: float(s) for m, s in mapping.items()})
        return added

    def zrange(self, key, start, stop, desc=False):
        items = sorted(self.zsets.get(key, {}).items(), key=lambda kv: (kv[1], kv[0]), reverse=desc)
        members = [member for member, _ in items]
        n = len(members)
        if start < 0:
            start = max(n + start, 0)
        if stop < 0:
            stop = n + stop
        if start > stop:
            return []
        return members[start:stop + 1]

    def zrem(self, key, *members):
        zset = self.zsets.get(key, {})
        removed = 0
        for member in members:
            if member in zset:
                del zset[member]
                removed += 1
        return removed

    def zcard(self, key):
        return len(self.zsets.get(key, {}))


def make_payload(team_name="Rockets", usn_start=1, section="b", hackathons=("0", "0", "0", "0"), **overrides):
    """Build a valid registration payload; USNs are 1AT23CS + 3 digits."""
    def usn(offset):
        return f"1AT23CS{usn_start + offset:03d}"

    payload = {
        "teamName": team_name,
        "leaderName": "Asha Rao",
        "leaderSection": section,
        "leaderUSN": usn(0),
        "leaderWhatsapp": "9876543210",
        "leaderEmail": "asha.rao@example.com",
        "leaderHackathons": hackathons[0],
        "member1Name": "Bhavya K",
        "member1USN": usn(1),
        "member1Hackathons": hackathons[1],
        "member2Name": "Chetan M",
        "member2USN": usn(2),
        "member2Hackathons": hackathons[2],
        "member3Name": "Divya S",
        "member3USN": usn(3),
        "member3Hackathons": hackathons[3],
        "member4Name": "",
        "member4USN": "",
        "member4Hackathons": "",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def content_repo(store):
    return ContentRepository(store)


@pytest.fixture
def registration_repo(store):
    return RegistrationRepository(store)


@pytest.fixture
def service(registration_repo, content_repo):
    clock = iter(range(1_700_000_000_000, 1_700_000_100_000, 1000))
    return RegistrationService(registration_repo, content_repo, clock=lambda: next(clock))


@pytest.fixture
def settings():
    return Settings(redis_url="redis://localhost:6379/0", admin_token=ADMIN_TOKEN)


@pytest.fixture
def client(settings, store):
    from main import create_app

    app = create_app(settings=settings, store=store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_TOKEN}"}


@pytest.fixture
def payload_factory():
    return make_payload
