"""
Application config model — loaded from a-la-carte.yml.

Keys may be written in camelCase (``manifestPath``) or snake_case
(``manifest_path``). Every section is optional.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from alacarte.core.services.provision.data.installers import DEFAULT_INSTALLER_ORDER


class SoftwareSettings(BaseModel):
    """Where the manifest lives and what to select by default."""

    model_config = ConfigDict(populate_by_name=True)

    manifest_path: str = Field(
        "software.yml", validation_alias=AliasChoices("manifestPath", "manifest_path"),
    )
    preload_keys: list[str] = Field(
        default_factory=list, validation_alias=AliasChoices("preloadKeys", "preload_keys"),
    )

    @field_validator("manifest_path")
    @classmethod
    def _manifest_path_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("software manifest path cannot be empty")
        return v


class ProvisionSettings(BaseModel):
    """How plans are built and executed."""

    model_config = ConfigDict(populate_by_name=True)

    installer_order: list[str] = Field(
        default_factory=lambda: list(DEFAULT_INSTALLER_ORDER),
        validation_alias=AliasChoices("installerOrder", "installer_order"),
    )
    log_file: str | None = Field(None, validation_alias=AliasChoices("logFile", "log_file"))
    lazy_only: bool = Field(False, validation_alias=AliasChoices("lazyOnly", "lazy_only"))
    template_scripts: bool = Field(
        True, validation_alias=AliasChoices("templateScripts", "template_scripts"),
    )

    @field_validator("installer_order")
    @classmethod
    def _installer_order_valid(cls, v: list[str]) -> list[str]:
        seen: set[str] = set()
        for name in v:
            if not name.strip():
                raise ValueError("installer order entries must be non-empty")
            if name in seen:
                raise ValueError(f"installer '{name}' listed more than once")
            seen.add(name)
        return v


class SystemSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    debug_mode: bool = Field(False, validation_alias=AliasChoices("debugMode", "debug_mode"))


class AppConfig(BaseModel):
    """Root application configuration."""

    software: SoftwareSettings = Field(default_factory=SoftwareSettings)
    provision: ProvisionSettings = Field(default_factory=ProvisionSettings)
    system: SystemSettings = Field(default_factory=SystemSettings)

    # Where the config was loaded from; not part of the file.
    config_path: str | None = Field(None, exclude=True)

    def resolve_manifest_path(self) -> Path:
        """Absolute manifest path.

        A relative path is taken relative to the config file's
        directory, or to the working directory when no file was loaded.
        """
        path = Path(self.software.manifest_path).expanduser()
        if path.is_absolute():
            return path
        base = Path(self.config_path).parent if self.config_path else Path.cwd()
        return base / path
