"""Exporters for assessments that have reached the output stage."""

from __future__ import annotations

import logging
from pathlib import Path

from regional_redlist.config import RedListConfig, load_config
from regional_redlist.export.base import Exporter, ExporterRegistry, display_category
from regional_redlist.export.csv_exporter import CsvExporter
from regional_redlist.export.json_exporter import JsonExporter
from regional_redlist.export.markdown_exporter import MarkdownExporter
from regional_redlist.models import AssessmentRecord

logger = logging.getLogger(__name__)


def export_assessment(
    record: AssessmentRecord,
    fmt: str | None = None,
    *,
    config: RedListConfig | dict | str | None = None,
) -> str:
    """Render *record* with a registered exporter.

    Parameters
    ----------
    record : AssessmentRecord
        A record that is ready for review or completed.
    fmt : str | None
        Exporter name; the configured default format when omitted.
    config : RedListConfig | dict | str | None
        Configuration source.

    Returns
    -------
    str

    Raises
    ------
    KeyError
        If *fmt* is not a registered exporter.
    ValueError
        If the record has not reached the output stage.
    """
    cfg = load_config(config)
    name = fmt or cfg.export.default_format
    if name == "markdown":
        exporter: Exporter = MarkdownExporter(
            confidence_target=cfg.workflow.confidence_target,
            threats_detail_chars=cfg.workflow.threats_detail_chars,
        )
    else:
        exporter = ExporterRegistry.create(name)
    text = exporter.export(record)
    logger.info("Exported assessment %s as %s", record.id, name)
    return text


def write_export(
    record: AssessmentRecord,
    directory: str | Path,
    fmt: str | None = None,
    *,
    config: RedListConfig | dict | str | None = None,
) -> Path:
    """Render *record* and write it to ``assessment-<id>.<ext>`` in *directory*.

    Returns
    -------
    Path
        The written file.
    """
    cfg = load_config(config)
    name = fmt or cfg.export.default_format
    exporter = ExporterRegistry.create(name)
    text = export_assessment(record, name, config=cfg)
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / exporter.filename(record)
    out_path.write_text(text, encoding="utf-8")
    return out_path


__all__ = [
    "CsvExporter",
    "Exporter",
    "ExporterRegistry",
    "JsonExporter",
    "MarkdownExporter",
    "display_category",
    "export_assessment",
    "write_export",
]
