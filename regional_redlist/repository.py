"""Assessment repository and auxiliary persisted entries."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from regional_redlist.config import RedListConfig, load_config
from regional_redlist.models import AssessmentRecord, Status
from regional_redlist.store import KeyValueStore, StoreRegistry

logger = logging.getLogger(__name__)

MODULE_PROGRESS_KEY = "moduleProgress"
MODULE_STEPS = ("step1", "step2", "step3")


def _region_key(region_id: str) -> str:
    return f"regionPolicy_{region_id}_reviewed"


class AssessmentRepository:
    """Read and write assessment records held in one store collection.

    All records live in a single list under the collection key. Concurrent
    writers are not reconciled: the last ``upsert`` wins.

    Parameters
    ----------
    store : KeyValueStore
        Backing key-value store.
    collection : str
        Key under which the list of records is stored.
    """

    def __init__(self, store: KeyValueStore, *, collection: str = "assessments") -> None:
        self._store = store
        self._collection = collection

    @classmethod
    def from_config(cls, config: RedListConfig | dict | str | None = None) -> AssessmentRepository:
        """Construct a repository from a config object or raw source.

        Parameters
        ----------
        config : RedListConfig | dict | str | None
            A ``RedListConfig``, a dict, a YAML file path, or ``None``
            for defaults.

        Returns
        -------
        AssessmentRepository
        """
        config = load_config(config)
        kwargs: dict[str, Any] = dict(config.store.extra)
        if config.store.type == "json":
            kwargs["path"] = config.store.path
        store = StoreRegistry.create(config.store.type, **kwargs)
        return cls(store, collection=config.workflow.collection)

    @property
    def store(self) -> KeyValueStore:
        return self._store

    def _load_raw(self) -> list[dict[str, Any]]:
        raw = self._store.load(self._collection)
        if raw is None:
            return []
        if not isinstance(raw, list):
            logger.warning("Collection %r is not a list; treating it as empty", self._collection)
            return []
        return [entry for entry in raw if isinstance(entry, dict) and entry.get("id")]

    def get(self, assessment_id: str) -> AssessmentRecord | None:
        """Return the record with *assessment_id*, or ``None`` if there is none."""
        for entry in self._load_raw():
            if entry["id"] == assessment_id:
                logger.debug("Loaded assessment %s", assessment_id)
                return AssessmentRecord.from_dict(entry)
        return None

    def upsert(self, record: AssessmentRecord) -> None:
        """Insert *record* or replace the stored record with the same id."""
        entries = self._load_raw()
        data = record.to_dict()
        for index, entry in enumerate(entries):
            if entry["id"] == record.id:
                entries[index] = data
                break
        else:
            entries.append(data)
        self._store.save(self._collection, entries)
        logger.debug("Saved assessment %s (stage=%d, status=%s)", record.id, record.current_stage, record.status.value)

    def list(self, status: Status | None = None) -> list[AssessmentRecord]:
        """Return records, most recently modified first.

        Parameters
        ----------
        status : Status | None
            Only return records with this status.

        Returns
        -------
        list[AssessmentRecord]
        """
        records = [AssessmentRecord.from_dict(entry) for entry in self._load_raw()]
        if status is not None:
            records = [record for record in records if record.status is status]
        records.sort(key=lambda record: record.last_modified, reverse=True)
        return records

    # -- Learning-module progress -------------------------------------------

    def get_module_progress(self) -> dict[str, int]:
        """Percent complete per learning module, defaulting to zero."""
        stored = self._store.load(MODULE_PROGRESS_KEY) or {}
        return {step: int(stored.get(step, 0)) for step in MODULE_STEPS}

    def set_module_progress(self, step: str, percent: int) -> dict[str, int]:
        """Record progress for one module, clamped to 0-100.

        Raises
        ------
        KeyError
            If *step* is not one of ``step1``, ``step2``, ``step3``.
        """
        if step not in MODULE_STEPS:
            msg = f"Unknown module {step!r}. Available: {', '.join(MODULE_STEPS)}"
            raise KeyError(msg)
        progress = self.get_module_progress()
        progress[step] = min(max(int(percent), 0), 100)
        self._store.save(MODULE_PROGRESS_KEY, progress)
        return progress

    # -- Region policy review marks -----------------------------------------

    def mark_region_reviewed(self, region_id: str) -> str:
        """Mark a region's policy as reviewed and return the timestamp stored."""
        timestamp = datetime.now(timezone.utc).isoformat()
        self._store.save(_region_key(region_id), timestamp)
        logger.info("Marked region %s as reviewed", region_id)
        return timestamp

    def region_reviewed_at(self, region_id: str) -> str | None:
        return self._store.load(_region_key(region_id))

    def clear_region_reviewed(self, region_id: str) -> None:
        self._store.delete(_region_key(region_id))
