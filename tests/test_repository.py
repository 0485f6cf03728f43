"""Tests for the assessment repository and auxiliary entries."""

import pytest

from regional_redlist.models import AssessmentRecord, Status
from regional_redlist.repository import MODULE_PROGRESS_KEY, AssessmentRepository
from regional_redlist.store import JsonFileStore, MemoryStore


def _record(assessment_id, last_modified, status=Status.DRAFT):
    return AssessmentRecord(id=assessment_id, taxon_name=assessment_id, status=status, last_modified=last_modified)


def test_get_missing_returns_none(repository):
    assert repository.get("nope") is None


def test_upsert_inserts_then_replaces(repository):
    repository.upsert(_record("a", "2025-01-01T00:00:00+00:00"))
    updated = _record("a", "2025-01-02T00:00:00+00:00")
    updated.taxon_name = "Renamed"
    repository.upsert(updated)
    records = repository.list()
    assert len(records) == 1
    assert records[0].taxon_name == "Renamed"


def test_all_records_share_one_collection():
    store = MemoryStore()
    repository = AssessmentRepository(store)
    repository.upsert(_record("a", "2025-01-01T00:00:00+00:00"))
    repository.upsert(_record("b", "2025-01-02T00:00:00+00:00"))
    assert [entry["id"] for entry in store.load("assessments")] == ["a", "b"]


def test_list_sorted_newest_first(repository):
    repository.upsert(_record("old", "2025-01-01T00:00:00+00:00"))
    repository.upsert(_record("new", "2025-03-01T00:00:00+00:00"))
    repository.upsert(_record("mid", "2025-02-01T00:00:00+00:00"))
    assert [record.id for record in repository.list()] == ["new", "mid", "old"]


def test_list_filters_by_status(repository):
    repository.upsert(_record("a", "2025-01-01T00:00:00+00:00"))
    repository.upsert(_record("b", "2025-01-02T00:00:00+00:00", Status.COMPLETED))
    assert [record.id for record in repository.list(Status.COMPLETED)] == ["b"]


def test_invalid_entries_are_skipped():
    store = MemoryStore()
    store.save("assessments", [{"taxonName": "no id"}, "junk", {"id": "ok"}])
    repository = AssessmentRepository(store)
    assert [record.id for record in repository.list()] == ["ok"]


def test_non_list_collection_is_empty():
    store = MemoryStore()
    store.save("assessments", {"id": "a"})
    assert AssessmentRepository(store).list() == []


def test_custom_collection():
    store = MemoryStore()
    repository = AssessmentRepository(store, collection="regional")
    repository.upsert(_record("a", "2025-01-01T00:00:00+00:00"))
    assert store.load("assessments") is None
    assert store.load("regional")[0]["id"] == "a"


def test_from_config_json_store(tmp_path):
    repository = AssessmentRepository.from_config({"store": {"type": "json", "path": str(tmp_path)}})
    assert isinstance(repository.store, JsonFileStore)
    repository.upsert(_record("a", "2025-01-01T00:00:00+00:00"))
    assert (tmp_path / "assessments.json").exists()


def test_from_config_defaults_to_memory():
    assert isinstance(AssessmentRepository.from_config().store, MemoryStore)


class TestModuleProgress:
    def test_defaults_to_zero(self, repository):
        assert repository.get_module_progress() == {"step1": 0, "step2": 0, "step3": 0}

    def test_set_and_clamp(self, repository):
        repository.set_module_progress("step1", 40)
        repository.set_module_progress("step2", 150)
        progress = repository.set_module_progress("step3", -5)
        assert progress == {"step1": 40, "step2": 100, "step3": 0}
        assert repository.store.load(MODULE_PROGRESS_KEY) == progress

    def test_unknown_module_raises(self, repository):
        with pytest.raises(KeyError, match="Unknown module"):
            repository.set_module_progress("step4", 10)


class TestRegionReview:
    def test_mark_and_read(self, repository):
        timestamp = repository.mark_region_reviewed("europe")
        assert repository.region_reviewed_at("europe") == timestamp
        assert repository.store.load("regionPolicy_europe_reviewed") == timestamp

    def test_unmarked_region(self, repository):
        assert repository.region_reviewed_at("africa") is None

    def test_clear(self, repository):
        repository.mark_region_reviewed("europe")
        repository.clear_region_reviewed("europe")
        assert repository.region_reviewed_at("europe") is None
