"""Access-policy configuration loader with Pydantic v2 validation.

Loads and validates a ``realty_access.yaml`` file into a typed
:class:`AccessConfig` object.  Unknown keys are allowed to support
future schema additions without breakage.

Example
-------
>>> loader = ConfigLoader()
>>> config = loader.load(Path("realty_access.yaml"))
>>> config.audit.log_path
PosixPath('decisions.jsonl')
"""
from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator

from realty_access_policy.errors import GENERIC_DENIAL


class AuditConfig(BaseModel):
    """Configuration for the decision audit trail."""

    model_config = {"extra": "allow"}

    enabled: bool = Field(default=False)
    log_path: Path = Field(default=Path("./access_decisions.jsonl"))


class ValidationConfig(BaseModel):
    """Configuration for schema validation of proposed records."""

    model_config = {"extra": "allow"}

    strict_offers: bool = Field(default=False)


class AccessConfig(BaseModel):
    """Top-level configuration schema.

    All sections are optional and fall back to defaults that mirror the
    enforcing database.
    """

    model_config = {"extra": "allow"}

    version: str = Field(default="1")
    profiles_file: Path | None = Field(default=None)
    audit: AuditConfig = Field(default_factory=AuditConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    deny_message: str = Field(default=GENERIC_DENIAL, min_length=1)

    @field_validator("version")
    @classmethod
    def validate_version(cls, value: str) -> str:
        if value not in {"1", "1.0"}:
            raise ValueError(f"Unsupported config version {value!r}. Supported: ['1', '1.0']")
        return value

    def resolve_paths(self, base_dir: Path) -> AccessConfig:
        """Return a copy whose relative paths are anchored at *base_dir*."""
        updates: dict[str, object] = {}
        if self.profiles_file is not None and not self.profiles_file.is_absolute():
            updates["profiles_file"] = base_dir / self.profiles_file
        if not self.audit.log_path.is_absolute():
            updates["audit"] = self.audit.model_copy(
                update={"log_path": base_dir / self.audit.log_path}
            )
        return self.model_copy(update=updates)


class ConfigLoader:
    """Loads and validates access-policy YAML configuration.

    Example
    -------
    >>> loader = ConfigLoader()
    >>> config = loader.load(Path("realty_access.yaml"))
    """

    def load(self, config_path: Path) -> AccessConfig:
        """Load and validate a YAML configuration file.

        Relative paths inside the file are resolved against the file's
        directory.

        Raises
        ------
        FileNotFoundError:
            When the config file does not exist.
        ValueError:
            When the YAML content fails Pydantic validation.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Access config not found: {config_path}")

        with config_path.open("r", encoding="utf-8") as fh:
            raw: dict[str, object] = yaml.safe_load(fh) or {}

        return AccessConfig.model_validate(raw).resolve_paths(config_path.parent)

    def load_string(self, yaml_content: str) -> AccessConfig:
        """Load and validate a YAML string directly."""
        raw: dict[str, object] = yaml.safe_load(yaml_content) or {}
        return AccessConfig.model_validate(raw)

    def defaults(self) -> AccessConfig:
        return AccessConfig()
