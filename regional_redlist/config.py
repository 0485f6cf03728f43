"""Unified configuration for stores, the workflow, and exports."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


@dataclass
class StoreConfig:
    """Key-value store selection.

    Parameters
    ----------
    type : str
        Registered store name (``"memory"`` or ``"json"``).
    path : str
        Directory used by file-backed stores.
    extra : dict
        Additional kwargs forwarded to the store constructor.
    """

    type: str = "memory"
    path: str = ".redlist"
    extra: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.type:
            msg = "store type must be a non-empty string"
            raise ValueError(msg)


@dataclass
class WorkflowConfig:
    """Workflow defaults and scoring thresholds.

    Parameters
    ----------
    collection : str
        Logical collection key assessment records are stored under.
    default_taxon_name : str
        Common name given to a freshly created draft.
    default_scientific_name : str
        Scientific name given to a freshly created draft.
    threats_detail_chars : int
        Threat descriptions longer than this earn confidence points.
    confidence_target : int
        Below this confidence the data-gap checklist is produced.
    """

    collection: str = "assessments"
    default_taxon_name: str = "New Taxon"
    default_scientific_name: str = "Species name"
    threats_detail_chars: int = 50
    confidence_target: int = 80

    def __post_init__(self) -> None:
        if not self.collection:
            msg = "collection must be a non-empty string"
            raise ValueError(msg)
        if self.threats_detail_chars < 0:
            msg = f"threats_detail_chars must be >= 0, got {self.threats_detail_chars}"
            raise ValueError(msg)
        if not 0 <= self.confidence_target <= 100:
            msg = f"confidence_target must be between 0 and 100, got {self.confidence_target}"
            raise ValueError(msg)


@dataclass
class ExportConfig:
    """Export defaults.

    Parameters
    ----------
    default_format : str
        Registered exporter used when no format is requested.
    """

    default_format: str = "json"


@dataclass
class RedListConfig:
    """Top-level configuration.

    Parameters
    ----------
    store : StoreConfig
    workflow : WorkflowConfig
    export : ExportConfig
    """

    store: StoreConfig = field(default_factory=StoreConfig)
    workflow: WorkflowConfig = field(default_factory=WorkflowConfig)
    export: ExportConfig = field(default_factory=ExportConfig)


def load_config(source: str | Path | dict[str, Any] | RedListConfig | None = None) -> RedListConfig:
    """Load a RedListConfig from a YAML file, dict, or environment variables.

    Environment variables (``REDLIST_STORE_TYPE``, ``REDLIST_STORE_PATH``,
    ``REDLIST_COLLECTION``, ``REDLIST_EXPORT_FORMAT``) take precedence over
    values from *source*.

    Parameters
    ----------
    source : str | Path | dict | RedListConfig | None
        A path to a YAML file, a raw dict, an existing config (returned
        as-is), or ``None`` to use only environment overrides on defaults.

    Returns
    -------
    RedListConfig

    Raises
    ------
    ValueError
        If a resulting setting is invalid.
    """
    if isinstance(source, RedListConfig):
        return source

    raw: dict[str, Any] = {}

    if isinstance(source, dict):
        raw = source
    elif source is not None:
        path = Path(source)
        if path.is_file():
            raw = _load_yaml(path)

    store_raw = raw.get("store", {}) or {}
    store = StoreConfig(
        type=os.environ.get("REDLIST_STORE_TYPE", store_raw.get("type", "memory")),
        path=os.environ.get("REDLIST_STORE_PATH", store_raw.get("path", ".redlist")),
        extra={k: v for k, v in store_raw.items() if k not in {"type", "path"}},
    )

    workflow_raw = raw.get("workflow", {}) or {}
    workflow = WorkflowConfig(
        collection=os.environ.get("REDLIST_COLLECTION", workflow_raw.get("collection", "assessments")),
        default_taxon_name=workflow_raw.get("default_taxon_name", "New Taxon"),
        default_scientific_name=workflow_raw.get("default_scientific_name", "Species name"),
        threats_detail_chars=int(workflow_raw.get("threats_detail_chars", 50)),
        confidence_target=int(workflow_raw.get("confidence_target", 80)),
    )

    export_raw = raw.get("export", {}) or {}
    export = ExportConfig(
        default_format=os.environ.get("REDLIST_EXPORT_FORMAT", export_raw.get("default_format", "json")),
    )

    return RedListConfig(store=store, workflow=workflow, export=export)


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file using PyYAML."""
    with open(path, encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}
