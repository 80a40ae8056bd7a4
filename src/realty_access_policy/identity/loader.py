"""YAML-based profile seed loader.

ProfileLoader reads a YAML document of ``users`` records and builds an
:class:`InMemoryIdentityResolver`.  Useful for the CLI, fixtures and
embedded deployments that mirror a small user base locally.

Schema
------
::

    version: "1"
    profiles:
      A1:
        role: agent
        clientIds:
          C1: true
      C1:
        role: buyer
        agentId: A1

Example
-------
::

    loader = ProfileLoader()
    resolver = loader.load("profiles.yaml")
    resolver.resolve("A1").role  # Role.AGENT
"""
from __future__ import annotations

import logging
from pathlib import Path

import yaml

from realty_access_policy.identity.profile import Profile
from realty_access_policy.identity.resolver import InMemoryIdentityResolver

logger = logging.getLogger(__name__)

_SUPPORTED_VERSIONS: frozenset[str] = frozenset(["1", "1.0"])


class ProfileConfigError(ValueError):
    """Raised when a profile YAML document is malformed.

    Attributes
    ----------
    config_path:
        The source of the document, if known.
    """

    def __init__(self, message: str, config_path: str | None = None) -> None:
        self.config_path = config_path
        prefix = f"[{config_path}] " if config_path else ""
        super().__init__(f"{prefix}{message}")


class ProfileLoader:
    """Loads profile seeds from YAML files, strings or dicts."""

    def load(self, config_path: str | Path) -> InMemoryIdentityResolver:
        """Load profiles from a YAML file on disk.

        Raises
        ------
        FileNotFoundError
            If the file does not exist.
        ProfileConfigError
            If the file cannot be parsed or a record is invalid.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Profile file not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ProfileConfigError(f"Failed to parse YAML: {exc}", str(config_path)) from exc

        return self._build(raw, str(config_path))

    def load_from_yaml_string(
        self,
        yaml_string: str,
        config_path: str | None = None,
    ) -> InMemoryIdentityResolver:
        try:
            raw = yaml.safe_load(yaml_string) or {}
        except yaml.YAMLError as exc:
            raise ProfileConfigError(f"Failed to parse YAML string: {exc}", config_path) from exc
        return self._build(raw, config_path)

    def load_from_dict(
        self,
        config: dict[str, object],
        config_path: str | None = None,
    ) -> InMemoryIdentityResolver:
        return self._build(config, config_path)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build(self, raw: object, config_path: str | None) -> InMemoryIdentityResolver:
        if not isinstance(raw, dict):
            raise ProfileConfigError("Profile document must be a YAML mapping.", config_path)

        version = str(raw.get("version", "1"))
        if version not in _SUPPORTED_VERSIONS:
            raise ProfileConfigError(
                f"Unsupported profile document version {version!r}. "
                f"Supported: {sorted(_SUPPORTED_VERSIONS)}.",
                config_path,
            )

        records = raw.get("profiles", {})
        if not isinstance(records, dict):
            raise ProfileConfigError("'profiles' must be a mapping of id to record.", config_path)

        resolver = InMemoryIdentityResolver()
        for principal_id, record in records.items():
            if not isinstance(record, dict):
                raise ProfileConfigError(
                    f"Profile {principal_id!r} must be a mapping.", config_path
                )
            try:
                resolver.add(str(principal_id), Profile.from_record(record))
            except ValueError as exc:
                raise ProfileConfigError(
                    f"Invalid profile {principal_id!r}: {exc}", config_path
                ) from exc

        logger.info("Loaded %d profiles from %s", len(resolver), config_path or "<dict>")
        return resolver
