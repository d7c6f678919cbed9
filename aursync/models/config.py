"""Package and run configuration models.

A run is described by a ``config.json`` file::

    {
        "token": "ghp_...",
        "global": {"sum_filter_regex": "\\.sha256$"},
        "packages": [
            {"name": "foo-bin", "owner": "foo", "repo": "foo"}
        ]
    }

Entries in ``global`` are defaults merged under every package entry.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from aursync.core.errors import ConfigError

REQUIRED_PACKAGE_FIELDS: tuple[str, ...] = ("name", "repo", "owner")


class PackageConfig(BaseModel):
    """Every recognised per-package option and its default."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    owner: str
    repo: str
    path: Path | None = None  # local checkout, defaults to remote-{name}
    sum_filter_regex: str = ""
    pkgbuild: str = "PKGBUILD"
    srcinfo: str = ".SRCINFO"
    dry_run: bool = False
    force_update: bool = False
    post_update: str | None = None

    @property
    def checkout(self) -> Path:
        return self.path if self.path is not None else Path(f"remote-{self.name}")

    @property
    def pkgbuild_path(self) -> Path:
        return self.checkout / self.pkgbuild

    @property
    def srcinfo_path(self) -> Path:
        return self.checkout / self.srcinfo

    @classmethod
    def from_entry(
        cls, entry: dict[str, Any], defaults: dict[str, Any] | None = None
    ) -> PackageConfig:
        """Merge *defaults* under *entry* and validate the result.

        Raises ``ConfigError`` if a required field is missing or any option
        has the wrong type.
        """
        merged: dict[str, Any] = {**(defaults or {}), **entry}
        missing = [key for key in REQUIRED_PACKAGE_FIELDS if merged.get(key) in (None, "")]
        if missing:
            raise ConfigError(
                "Missing fields in configuration. Requires `name`, `repo`, and `owner` "
                f"(missing: {', '.join(missing)}).",
                package=str(merged["name"]) if merged.get("name") else None,
            )
        try:
            return cls.model_validate(merged)
        except ValidationError as exc:
            raise ConfigError(
                f"Invalid configuration for {merged['name']}: {exc}", package=str(merged["name"])
            ) from exc


class SyncConfig(BaseModel):
    """The whole ``config.json`` file."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    token: str | None = None
    global_options: dict[str, Any] = Field(default_factory=dict, alias="global")
    packages: list[Any]

    @classmethod
    def load(cls, path: Path | str) -> SyncConfig:
        """Read and validate a configuration file.

        Raises ``ConfigError`` when the file is missing, is not JSON, or has
        no ``packages`` array.  Individual package entries are validated
        later so one bad entry only fails that package.
        """
        config_path = Path(path)
        try:
            raw = json.loads(config_path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise ConfigError(f"Config file not found: {config_path}") from exc
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Config file {config_path} is not valid JSON: {exc}") from exc
        return cls.from_dict(raw)

    @classmethod
    def from_dict(cls, raw: Any) -> SyncConfig:
        if not isinstance(raw, dict) or not isinstance(raw.get("packages"), list):
            raise ConfigError("Config has to have an array of packages!")
        if not isinstance(raw.get("global", {}), dict):
            raise ConfigError("`global` must be an object of package defaults.")
        try:
            return cls.model_validate(raw)
        except ValidationError as exc:
            raise ConfigError(f"Invalid config file: {exc}") from exc

    def package_configs(
        self, *, force_update: bool = False, dry_run: bool = False
    ) -> list[PackageConfig | ConfigError]:
        """Validate each package entry; failures are returned, not raised.

        *force_update* and *dry_run* turn the option on for every package
        (command-line flags); they never turn it off.
        """
        overrides: dict[str, Any] = {}
        if force_update:
            overrides["force_update"] = True
        if dry_run:
            overrides["dry_run"] = True

        results: list[PackageConfig | ConfigError] = []
        for entry in self.packages:
            if not isinstance(entry, dict):
                results.append(ConfigError(f"Package entry must be an object, got {entry!r}"))
                continue
            try:
                results.append(
                    PackageConfig.from_entry({**entry, **overrides}, self.global_options)
                )
            except ConfigError as exc:
                results.append(exc)
        return results
