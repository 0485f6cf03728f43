"""Single-row CSV export."""

from __future__ import annotations

import csv
import io

from regional_redlist.export.base import Exporter, ExporterRegistry, display_category
from regional_redlist.models import AssessmentRecord

HEADER = (
    "Scientific Name",
    "Common Name",
    "Regional Category",
    "Criteria",
    "Preliminary Category",
    "Adjustment Steps",
    "Confidence",
)


@ExporterRegistry.register("csv")
class CsvExporter(Exporter):
    """Header line plus one quoted data row."""

    name = "csv"
    file_extension = "csv"

    def render(self, record: AssessmentRecord) -> str:
        flat = record.flat_summary()
        buffer = io.StringIO()
        buffer.write(",".join(HEADER) + "\n")
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(
            [
                record.scientific_name,
                record.taxon_name,
                display_category(record),
                flat["criteriaMet"] or "Unknown",
                flat["preliminaryCategory"],
                flat["adjustmentSteps"],
                f"{flat['confidence']}%",
            ]
        )
        return buffer.getvalue()
