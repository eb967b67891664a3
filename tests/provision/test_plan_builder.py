"""
Tests for plan building — skipping rules, scripts, installer selection.
"""

import pytest

from alacarte.core.models.manifest import Manifest
from alacarte.core.models.plan import InstallInstruction
from alacarte.core.services.provision.errors import ManifestKeyError
from alacarte.core.services.provision.resolver.dependency_expansion import (
    expand_dependencies,
)
from alacarte.core.services.provision.resolver.plan_builder import (
    build_plan,
    select_installer,
)
from tests.provision.simulated_profiles import PROFILES

DEBIAN = PROFILES["debian-x64"]


def _i(type_: str, package: str) -> InstallInstruction:
    return InstallInstruction(type_, package)


class TestBuildPlan:
    def test_installed_key_skipped_but_dependency_kept(self, chain_manifest):
        keys = expand_dependencies(["a"], chain_manifest)
        plan = build_plan(keys, chain_manifest, DEBIAN, installed={"b"})
        assert plan == [_i("apt", "c-pkg"), _i("apt", "a-pkg")]

    def test_skip_notes(self, chain_manifest):
        notes: list[str] = []
        build_plan(["c", "b", "a"], chain_manifest, DEBIAN, installed={"b"}, notify=notes.append)
        assert notes == ["Skipping b: already installed"]

    def test_scripts_then_one_installer(self):
        manifest = Manifest.from_mapping({
            "tool": {"script": ["echo one", "echo two"], "apt": "tool", "brew": "tool"},
        })
        plan = build_plan(["tool"], manifest, DEBIAN)
        assert plan == [
            _i("script", "echo one"),
            _i("script", "echo two"),
            _i("apt", "tool"),
        ]

    def test_script_only_entry(self):
        manifest = Manifest.from_mapping({"starship": {"script": "curl -sS x | sh"}})
        assert build_plan(["starship"], manifest, DEBIAN) == [_i("script", "curl -sS x | sh")]

    def test_no_resolvable_installer_yields_nothing(self):
        manifest = Manifest.from_mapping({"mac-only": {"brew": "thing"}})
        plan = build_plan(["mac-only"], manifest, DEBIAN, installer_order=["apt", "dnf"])
        assert plan == []

    def test_headless_skips_apps(self):
        manifest = Manifest.from_mapping({
            "gimp": {"_app": "GIMP.app", "flatpak": "org.gimp.GIMP"},
            "bat": {"apt": "bat"},
        })
        notes: list[str] = []
        plan = build_plan(["gimp", "bat"], manifest, PROFILES["ubuntu-server"], notify=notes.append)
        assert plan == [_i("apt", "bat")]
        assert notes == ["Skipping gimp: headless mode"]

    def test_apps_planned_with_display(self):
        manifest = Manifest.from_mapping({"gimp": {"_app": "GIMP.app", "flatpak": "org.gimp.GIMP"}})
        plan = build_plan(["gimp"], manifest, PROFILES["ubuntu-x64"])
        assert plan == [_i("flatpak", "org.gimp.GIMP")]

    def test_lazy_only_skips_non_lazy(self):
        manifest = Manifest.from_mapping({
            "eager": {"apt": "eager"},
            "sleepy": {"apt": "sleepy", "lazy": True},
        })
        notes: list[str] = []
        plan = build_plan(["eager", "sleepy"], manifest, DEBIAN, lazy_only=True, notify=notes.append)
        assert plan == [_i("apt", "sleepy")]
        assert notes == ["Skipping eager: not marked lazy"]

    def test_lazy_entries_planned_by_default(self):
        manifest = Manifest.from_mapping({"sleepy": {"apt": "sleepy", "_lazy": True}})
        assert build_plan(["sleepy"], manifest, DEBIAN) == [_i("apt", "sleepy")]

    def test_unknown_key(self, chain_manifest):
        with pytest.raises(ManifestKeyError):
            build_plan(["zzz"], chain_manifest, DEBIAN)


class TestSelectInstaller:
    def test_default_order_prefers_apt(self):
        entry = Manifest.from_mapping({"x": {"brew": "b", "apt": "a"}})["x"]
        assert select_installer(entry, DEBIAN) == _i("apt", "a")

    def test_custom_order(self):
        entry = Manifest.from_mapping({"x": {"brew": "b", "apt": "a"}})["x"]
        assert select_installer(entry, DEBIAN, ["brew", "apt"]) == _i("brew", "b")

    def test_composite_override(self):
        entry = Manifest.from_mapping({"x": {"apt:debian:x64": "foo-x64", "apt": "foo"}})["x"]
        assert select_installer(entry, PROFILES["debian-x64"]) == _i("apt", "foo-x64")
        assert select_installer(entry, PROFILES["debian-arm64"]) == _i("apt", "foo")
        assert select_installer(entry, PROFILES["ubuntu-x64"]) == _i("apt", "foo")

    def test_override_without_bare_field(self):
        entry = Manifest.from_mapping({"x": {"brew:darwin:arm64": "x-arm", "cargo": "x"}})["x"]
        assert select_installer(entry, PROFILES["macos-arm64"]) == _i("brew", "x-arm")
        assert select_installer(entry, PROFILES["macos-x64"]) == _i("cargo", "x")

    @pytest.mark.parametrize("installer", ["apt", "apk", "dnf", "zypper", "yum"])
    def test_command_fragment_reduced_to_package(self, installer):
        entry = Manifest.from_mapping({"x": {installer: "sudo pkg-tool install -y ripgrep"}})["x"]
        assert select_installer(entry, DEBIAN, [installer]) == _i(installer, "ripgrep")

    def test_other_installers_keep_whitespace(self):
        entry = Manifest.from_mapping({"x": {"go": "github.com/a/b@latest extra"}})["x"]
        assert select_installer(entry, DEBIAN, ["go"]) == _i("go", "github.com/a/b@latest extra")

    def test_list_value_uses_first(self):
        entry = Manifest.from_mapping({"x": {"apt": ["first", "second"]}})["x"]
        assert select_installer(entry, DEBIAN) == _i("apt", "first")

    def test_binary_channel(self):
        entry = Manifest.from_mapping({"x": {"binary:linux": "https://example.com/x.tar.gz"}})["x"]
        assert select_installer(entry, DEBIAN) == _i("binary:linux", "https://example.com/x.tar.gz")
