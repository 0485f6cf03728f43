"""Structured JSON export."""

from __future__ import annotations

import json
from typing import Any

from regional_redlist.export.base import Exporter, ExporterRegistry, display_category
from regional_redlist.models import AssessmentRecord


@ExporterRegistry.register("json")
class JsonExporter(Exporter):
    """Nested document with taxon, outcome, per-step results and metadata."""

    name = "json"
    file_extension = "json"

    def build(self, record: AssessmentRecord) -> dict[str, Any]:
        flat = record.flat_summary()
        return {
            "taxon": {
                "commonName": record.taxon_name,
                "scientificName": record.scientific_name,
            },
            "assessment": {
                "finalRegionalCategory": display_category(record),
                "criteriaMet": flat["criteriaMet"] or "Unknown",
                "preliminaryCategory": flat["preliminaryCategory"] or None,
                "adjustmentSteps": flat["adjustmentSteps"],
                "adjustmentRationale": flat["adjustmentRationale"],
                "confidence": flat["confidence"],
            },
            "step1": record.step1.to_dict() if record.step1 else None,
            "step2": record.step2.to_dict() if record.step2 else None,
            "step3": record.step3.to_dict() if record.step3 else None,
            "metadata": {
                "assessmentDate": record.last_modified,
                "assessmentId": record.id,
                "region": record.region or None,
            },
        }

    def render(self, record: AssessmentRecord) -> str:
        return json.dumps(self.build(record), indent=2, ensure_ascii=False) + "\n"
