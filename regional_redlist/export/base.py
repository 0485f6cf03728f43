"""Abstract exporter and registry."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from regional_redlist.models import AssessmentRecord, Stage, Status

EXPORTABLE_STATUSES = (Status.READY_FOR_REVIEW, Status.COMPLETED)


class Exporter(ABC):
    """Render an assessment record that has reached the output stage.

    Subclasses must set ``name`` and ``file_extension`` and implement ``render``.
    """

    name: str = ""
    file_extension: str = ""

    def export(self, record: AssessmentRecord) -> str:
        """Render *record* as text.

        Parameters
        ----------
        record : AssessmentRecord
            A record that is ready for review or completed.

        Returns
        -------
        str

        Raises
        ------
        ValueError
            If the record has not reached the output stage.
        """
        if record.status not in EXPORTABLE_STATUSES or record.current_stage != Stage.OUTPUT:
            msg = f"Assessment {record.id} is not ready for export (status={record.status.value})"
            raise ValueError(msg)
        return self.render(record)

    def filename(self, record: AssessmentRecord) -> str:
        return f"assessment-{record.id}.{self.file_extension}"

    @abstractmethod
    def render(self, record: AssessmentRecord) -> str:
        """Return the rendered document for *record*."""


class ExporterRegistry:
    """Discover and instantiate registered exporters."""

    _exporters: dict[str, type[Exporter]] = {}

    @classmethod
    def register(cls, name: str):
        """Class decorator that registers an exporter under *name*."""

        def decorator(klass: type[Exporter]) -> type[Exporter]:
            cls._exporters[name] = klass
            return klass

        return decorator

    @classmethod
    def create(cls, name: str, **kwargs: Any) -> Exporter:
        """Instantiate a registered exporter.

        Raises
        ------
        KeyError
            If *name* is not registered.
        """
        if name not in cls._exporters:
            available = ", ".join(sorted(cls._exporters)) or "(none)"
            msg = f"Unknown exporter {name!r}. Available: {available}"
            raise KeyError(msg)
        return cls._exporters[name](**kwargs)

    @classmethod
    def available(cls) -> list[str]:
        """Return sorted list of registered exporter names."""
        return sorted(cls._exporters)


def display_category(record: AssessmentRecord) -> str:
    """Final category code with the adjustment marker (``°``) when Step 3 moved it."""
    flat = record.flat_summary()
    category = flat["finalCategory"] or "Unknown"
    return category + ("°" if flat["adjustmentSteps"] != 0 else "")
