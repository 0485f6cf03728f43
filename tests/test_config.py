"""Tests for configuration loading."""

import pytest

from regional_redlist.config import (
    ExportConfig,
    RedListConfig,
    StoreConfig,
    WorkflowConfig,
    load_config,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("REDLIST_STORE_TYPE", "REDLIST_STORE_PATH", "REDLIST_COLLECTION", "REDLIST_EXPORT_FORMAT"):
        monkeypatch.delenv(name, raising=False)


def test_load_config_defaults():
    config = load_config()
    assert config.store.type == "memory"
    assert config.store.path == ".redlist"
    assert config.workflow.collection == "assessments"
    assert config.workflow.threats_detail_chars == 50
    assert config.workflow.confidence_target == 80
    assert config.export.default_format == "json"


def test_load_config_from_dict():
    config = load_config(
        {
            "store": {"type": "json", "path": "/tmp/redlist", "indent": 4},
            "workflow": {"confidence_target": 90},
            "export": {"default_format": "csv"},
        }
    )
    assert config.store.type == "json"
    assert config.store.extra == {"indent": 4}
    assert config.workflow.confidence_target == 90
    assert config.export.default_format == "csv"


def test_load_config_from_yaml(tmp_path):
    path = tmp_path / "redlist.yaml"
    path.write_text(
        "store:\n  type: json\n  path: data\nworkflow:\n  default_taxon_name: Unnamed taxon\n",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.store.path == "data"
    assert config.workflow.default_taxon_name == "Unnamed taxon"


def test_load_config_empty_yaml(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(str(path)).store.type == "memory"


def test_load_config_passes_through_instance():
    config = RedListConfig(export=ExportConfig(default_format="markdown"))
    assert load_config(config) is config


def test_load_config_env_override(monkeypatch):
    monkeypatch.setenv("REDLIST_STORE_TYPE", "json")
    monkeypatch.setenv("REDLIST_COLLECTION", "regional")
    monkeypatch.setenv("REDLIST_EXPORT_FORMAT", "csv")
    config = load_config()
    assert config.store.type == "json"
    assert config.workflow.collection == "regional"
    assert config.export.default_format == "csv"


def test_load_config_env_overrides_dict(monkeypatch):
    monkeypatch.setenv("REDLIST_STORE_PATH", "env-path")
    config = load_config({"store": {"path": "dict-path"}})
    assert config.store.path == "env-path"


class TestValidation:
    """Validation in the config dataclasses' __post_init__."""

    def test_empty_store_type_raises(self):
        with pytest.raises(ValueError, match="store type must be a non-empty string"):
            StoreConfig(type="")

    def test_empty_collection_raises(self):
        with pytest.raises(ValueError, match="collection must be a non-empty string"):
            WorkflowConfig(collection="")

    def test_negative_threats_chars_raises(self):
        with pytest.raises(ValueError, match="threats_detail_chars must be >= 0"):
            WorkflowConfig(threats_detail_chars=-1)

    @pytest.mark.parametrize("target", [-1, 101])
    def test_confidence_target_out_of_range_raises(self, target):
        with pytest.raises(ValueError, match="confidence_target must be between 0 and 100"):
            WorkflowConfig(confidence_target=target)

    def test_invalid_value_from_dict_raises(self):
        with pytest.raises(ValueError):
            load_config({"workflow": {"confidence_target": 150}})
