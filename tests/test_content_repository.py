"""
Tests for the content repository and legacy-shape migration.

Path: tests/test_content_repository.py
"""
import json

import pytest

from event_site.core.exceptions import ConfigError
from event_site.schemas.content import ContentDocument, migrate_legacy
from event_site.services.content_service import (
    CONTENT_KEY,
    UPDATED_AT_KEY,
    ContentRepository,
    load_default_content,
)


def sample_content(**overrides):
    data = {
        "hero": {"title": "Pulse Hackathon", "tagline": "Build things", "badges": ["Jan 24", "Hall B"]},
        "details": [{"title": "Venue", "body": "Hall B"}],
        "schedule": [{"time": "9:00 AM", "title": "Kickoff", "body": "Keynote"}],
        "team": [{"name": "Avery Lane", "role": "Lead Organizer"}],
        "faqs": [{"q": "Who can join?", "a": "Everyone"}],
    }
    data.update(overrides)
    return ContentDocument.model_validate(data)


class TestReadWrite:

    def test_read_before_write(self, content_repo):
        assert content_repo.read() is None

    def test_round_trip(self, content_repo):
        content = sample_content(
            stats=[{"title": "Mentors", "value": "15", "caption": "AI/ML"}],
            registerNote="Seats limited",
        )
        content_repo.write(content)
        assert content_repo.read() == content

    def test_round_trip_empty_optional_arrays(self, content_repo, store):
        content = sample_content(schedule=[], stats=[])
        content_repo.write(content)

        restored = content_repo.read()
        assert restored.schedule == []
        assert restored.stats == []
        assert restored.registerNote is None
        assert "registerNote" not in json.loads(store.strings[CONTENT_KEY])

    def test_last_writer_wins(self, content_repo):
        content_repo.write(sample_content())
        second = sample_content(hero={"title": "Second", "tagline": "t"})
        content_repo.write(second)
        assert content_repo.read().hero.title == "Second"
        assert content_repo.read().hero.badges == []

    def test_updated_at_marker(self, content_repo, store):
        assert content_repo.updated_at() is None
        content_repo.write(sample_content())
        assert int(store.strings[UPDATED_AT_KEY]) == content_repo.updated_at()

    def test_write_without_store(self):
        with pytest.raises(ConfigError):
            ContentRepository(None).write(sample_content())

    def test_read_without_store(self):
        assert ContentRepository(None).read() is None

    @pytest.mark.parametrize("raw", ["{broken", "[]", json.dumps({"hero": 1})])
    def test_corrupt_document_reads_as_absent(self, content_repo, store, raw):
        store.set(CONTENT_KEY, raw)
        assert content_repo.read() is None

    def test_read_failure_degrades_to_absent(self, content_repo, store, monkeypatch):
        def broken(key):
            raise ConnectionError("down")

        monkeypatch.setattr(store, "get", broken)
        assert content_repo.read() is None


class TestMigration:

    LEGACY = {
        "hero": {"title": "Old", "tagline": "Legacy"},
        "faq": [{"question": "Why?", "answer": "Because"}],
        "team": [],
    }

    def test_migrate_legacy_shape(self):
        doc, changed = migrate_legacy(self.LEGACY)
        assert changed
        assert doc["faqs"] == [{"q": "Why?", "a": "Because"}]
        assert doc["details"] == [] and doc["schedule"] == []
        assert doc["hero"]["badges"] == []
        assert "faq" in self.LEGACY

    def test_rename_only_leaves_missing_lists(self):
        doc, changed = migrate_legacy(self.LEGACY, fill_defaults=False)
        assert changed
        assert doc["faqs"] == [{"q": "Why?", "a": "Because"}]
        assert "details" not in doc and "schedule" not in doc
        assert "badges" not in doc["hero"]

    def test_current_shape_unchanged(self):
        raw = sample_content().to_storage()
        doc, changed = migrate_legacy(raw)
        assert not changed
        assert doc == raw

    def test_read_upgrades_in_memory(self, content_repo, store):
        store.set(CONTENT_KEY, json.dumps(self.LEGACY))
        content = content_repo.read()
        assert content.faqs[0].q == "Why?"
        assert content_repo.needs_migration()

    def test_migrate_rewrites_store(self, content_repo, store):
        store.set(CONTENT_KEY, json.dumps(self.LEGACY))
        assert content_repo.migrate() is True
        assert not content_repo.needs_migration()
        assert content_repo.migrate() is False
        assert "faqs" in json.loads(store.strings[CONTENT_KEY])

    def test_nothing_to_migrate(self, content_repo):
        assert content_repo.needs_migration() is False
        assert content_repo.migrate() is False


def test_default_content_is_valid():
    content = load_default_content()
    assert content.hero.title == "Hack The Throne"
    assert len(content.faqs) == 10
    assert content.schedule == []
