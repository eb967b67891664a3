"""
Tests for manifest file loading.
"""

from pathlib import Path

import pytest

from alacarte.core.config.manifest_loader import ManifestError, load_manifest, parse_manifest


class TestLoadManifest:
    def test_sample(self, manifest_file: Path):
        manifest = load_manifest(manifest_file)
        assert list(manifest) == ["bat", "ripgrep", "gimp", "tldr", "starship"]
        assert manifest["bat"].groups == ("cli", "dev")
        assert manifest["bat"].values["apt:debian:arm64"] == "bat-arm"
        assert manifest["gimp"].app == "GIMP.app"
        assert manifest["gimp"].values["_bin:flatpak"] == "gimp"
        assert manifest["tldr"].lazy is True
        assert manifest["tldr"].deps == ("ripgrep",)
        assert len(manifest["starship"].script) == 1

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ManifestError, match="not found"):
            load_manifest(tmp_path / "software.yml")

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "software.yml"
        path.write_text("")
        assert load_manifest(path) == {}


class TestParseManifest:
    def test_empty_entry_body(self):
        manifest = parse_manifest("bare:\n")
        assert manifest["bare"].values == {}

    def test_invalid_yaml(self):
        with pytest.raises(ManifestError, match="Invalid YAML"):
            parse_manifest("bat: [unclosed\n")

    def test_top_level_list(self):
        with pytest.raises(ManifestError, match="Expected a YAML mapping"):
            parse_manifest("- bat\n")

    def test_entry_not_a_mapping(self):
        with pytest.raises(ManifestError, match="Entry 'bat'"):
            parse_manifest("bat: just-a-string\n")

    def test_invalid_field(self):
        with pytest.raises(ManifestError, match="Invalid manifest entry"):
            parse_manifest("bat:\n  _groups: {a: 1}\n")
