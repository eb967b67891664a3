"""
Manifest model — what software the user wants, and how each item installs.

A manifest maps a logical key (``bat``, ``docker``, ``vscode``) to one
``SoftwareEntry``. Each entry carries a small block of typed metadata
(name, description, dependencies, scripts, lazy/app markers) plus the
full ordered mapping of every key the manifest author wrote, including
composite override keys such as ``apt:debian:x64`` or ``_bin:flatpak``.

Installer resolution reads ``SoftwareEntry.values`` directly, so there is
a single source of truth for per-platform package names.
"""

from __future__ import annotations

from typing import Any, Iterable

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic_core import core_schema


def _normalize_strings(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, (list, tuple)):
        out: list[str] = []
        for item in value:
            if not isinstance(item, str):
                raise ValueError(
                    f"expected a string or a list of strings, got list item {item!r}"
                )
            out.append(item)
        return tuple(out)
    raise ValueError(
        f"expected a string or a list of strings, got {type(value).__name__}"
    )


class StringList(tuple):
    """An immutable list of strings built from "one string or many".

    ``StringList("bat")`` and ``StringList(["bat"])`` are equal;
    ``StringList(None)`` is empty. Any other shape raises ``ValueError``.
    """

    def __new__(cls, value: Any = None) -> StringList:
        return super().__new__(cls, _normalize_strings(value))

    def __repr__(self) -> str:
        return f"StringList({list(self)!r})"

    @property
    def first(self) -> str | None:
        return self[0] if self else None

    @classmethod
    def __get_pydantic_core_schema__(cls, source: Any, handler: Any) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls,
            serialization=core_schema.plain_serializer_function_ser_schema(list),
        )


class SoftwareEntry(BaseModel):
    """One logical software item from the manifest.

    Typed metadata is parsed from the well-known keys. Every key the
    author wrote (metadata included) is also kept, in source order, in
    ``values`` — that mapping is what installer resolution queries.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field("", validation_alias=AliasChoices("_name", "name"))
    short: str = Field("", validation_alias=AliasChoices("_short", "short"))
    desc: str = Field("", validation_alias=AliasChoices("_desc", "desc"))
    docs: str = Field("", validation_alias=AliasChoices("_docs", "docs"))
    home: str = Field("", validation_alias=AliasChoices("_home", "home"))
    github: str = Field("", validation_alias=AliasChoices("_github", "github"))

    bin: StringList = Field(default_factory=StringList, validation_alias=AliasChoices("_bin", "bin"))
    groups: StringList = Field(default_factory=StringList, validation_alias=AliasChoices("_groups", "groups"))
    deps: StringList = Field(default_factory=StringList, validation_alias=AliasChoices("_deps", "deps"))
    script: StringList = Field(default_factory=StringList, validation_alias=AliasChoices("_script", "script"))

    app: str = Field("", validation_alias=AliasChoices("_app", "app"))
    lazy: bool = Field(False, validation_alias=AliasChoices("_lazy", "lazy"))

    values: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _keep_raw_values(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        out = dict(data)
        # An authored ``values`` key is an ordinary manifest key, never the raw map.
        out["values"] = {k: v for k, v in data.items() if isinstance(k, str)}
        # A list-valued app marker (``_app: [Foo.app]``) reads as its first item.
        for key in ("_app", "app"):
            if isinstance(out.get(key), list):
                items = out[key]
                out[key] = items[0] if items and isinstance(items[0], str) else ""
        return out

    @property
    def is_gui_app(self) -> bool:
        return bool(self.app)

    @property
    def display_name(self) -> str:
        return self.name or self.short

    def installer_values(self, installer: str) -> StringList:
        """Normalized package list for a bare installer field (no overrides)."""
        try:
            return StringList(self.values.get(installer))
        except ValueError:
            return StringList()

    def in_groups(self, groups: Iterable[str]) -> bool:
        wanted = set(groups)
        return any(g in wanted for g in self.groups)


class Manifest(dict[str, SoftwareEntry]):
    """Mapping of manifest key → SoftwareEntry, in source order."""

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> Manifest:
        """Build a manifest from an already-parsed mapping.

        Entries may be raw dicts or ``SoftwareEntry`` instances. A ``None``
        entry (``foo:`` with no body in YAML) becomes an empty entry.
        """
        manifest = cls()
        for key, raw in data.items():
            if isinstance(raw, SoftwareEntry):
                manifest[str(key)] = raw
            else:
                manifest[str(key)] = SoftwareEntry.model_validate(raw or {})
        return manifest

    def keys_in_groups(self, groups: Iterable[str]) -> list[str]:
        wanted = list(groups)
        return [key for key, entry in self.items() if entry.in_groups(wanted)]
