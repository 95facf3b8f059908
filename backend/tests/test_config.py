"""Tests for Settings / validate_config."""
from entity_graph import config
from entity_graph.config import Settings, validate_config


def test_settings_fields():
    fields = Settings.model_fields
    for name in (
        "max_states",
        "base_only_component_id",
        "form_domain",
        "forms_dir",
        "forms_base_url",
        "http_timeout_seconds",
    ):
        assert name in fields


def test_validate_config_ok(monkeypatch, tmp_path):
    monkeypatch.setattr(config.settings, "max_states", 16)
    monkeypatch.setattr(config.settings, "forms_dir", str(tmp_path))
    assert validate_config()


def test_validate_config_rejects_non_positive_cap(monkeypatch, tmp_path):
    monkeypatch.setattr(config.settings, "max_states", 0)
    monkeypatch.setattr(config.settings, "forms_dir", str(tmp_path))
    assert not validate_config()


def test_validate_config_missing_forms_dir(monkeypatch, tmp_path):
    monkeypatch.setattr(config.settings, "max_states", 16)
    monkeypatch.setattr(config.settings, "forms_dir", str(tmp_path / "missing"))
    assert not validate_config()
