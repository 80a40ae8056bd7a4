"""Tests for config/loader.py — ConfigLoader and AccessConfig."""
from __future__ import annotations

import textwrap
from pathlib import Path

import pytest
from pydantic import ValidationError

from realty_access_policy.config.loader import AccessConfig, ConfigLoader


@pytest.fixture()
def loader() -> ConfigLoader:
    return ConfigLoader()


class TestDefaults:
    def test_defaults(self, loader: ConfigLoader) -> None:
        config = loader.defaults()
        assert config.version == "1"
        assert config.profiles_file is None
        assert config.audit.enabled is False
        assert config.validation.strict_offers is False
        assert config.deny_message == "Access denied."

    def test_empty_string(self, loader: ConfigLoader) -> None:
        assert loader.load_string("") == AccessConfig()


class TestLoadString:
    def test_sections(self, loader: ConfigLoader) -> None:
        config = loader.load_string(
            textwrap.dedent(
                """\
                version: "1.0"
                audit:
                  enabled: true
                  log_path: /var/log/access.jsonl
                validation:
                  strict_offers: true
                deny_message: Not permitted.
                """
            )
        )
        assert config.audit.enabled is True
        assert config.audit.log_path == Path("/var/log/access.jsonl")
        assert config.validation.strict_offers is True
        assert config.deny_message == "Not permitted."

    def test_unknown_keys_allowed(self, loader: ConfigLoader) -> None:
        config = loader.load_string("region: eu-west\n")
        assert config.model_extra == {"region": "eu-west"}

    def test_unsupported_version(self, loader: ConfigLoader) -> None:
        with pytest.raises(ValidationError):
            loader.load_string("version: '3'\n")

    def test_empty_deny_message_rejected(self, loader: ConfigLoader) -> None:
        with pytest.raises(ValueError):
            loader.load_string("deny_message: ''\n")


class TestLoadFile:
    def test_missing_file(self, loader: ConfigLoader, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            loader.load(tmp_path / "realty_access.yaml")

    def test_relative_paths_resolved_against_file(self, loader: ConfigLoader, tmp_path: Path) -> None:
        path = tmp_path / "realty_access.yaml"
        path.write_text(
            "profiles_file: seeds/profiles.yaml\naudit:\n  log_path: logs/decisions.jsonl\n",
            encoding="utf-8",
        )
        config = loader.load(path)
        assert config.profiles_file == tmp_path / "seeds" / "profiles.yaml"
        assert config.audit.log_path == tmp_path / "logs" / "decisions.jsonl"

    def test_absolute_paths_untouched(self, loader: ConfigLoader, tmp_path: Path) -> None:
        target = tmp_path / "abs.jsonl"
        path = tmp_path / "realty_access.yaml"
        path.write_text(f"audit:\n  log_path: {target}\n", encoding="utf-8")
        assert loader.load(path).audit.log_path == target
