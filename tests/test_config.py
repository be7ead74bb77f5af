"""
Tests for sitewrap.config.loader module.

Tests options file loading including:
- YAML file loading
- camelCase and snake_case keys
- Path resolution relative to the file
- Error handling
"""

from __future__ import annotations

import pytest

from sitewrap.config import load_options_file
from sitewrap.exceptions import ConfigError


class TestOptionsFileLoading:
    """Tests for basic options file loading."""

    def test_load_snake_case_file(self, create_yaml_file):
        """Test loading a file with snake_case keys."""
        path = create_yaml_file("defaults.yaml", {"width": 1280, "single_instance": True})

        fragment = load_options_file(path)

        assert fragment.to_dict() == {"single_instance": True, "width": 1280}

    def test_load_camel_case_file(self, create_yaml_file):
        """Test that sidecar-style camelCase keys are accepted."""
        path = create_yaml_file(
            "defaults.yaml", {"internalUrls": ".*example.*", "hideWindowFrame": False}
        )

        fragment = load_options_file(path)

        assert fragment["internal_urls"] == ".*example.*"
        assert fragment["hide_window_frame"] is False

    def test_missing_file_raises(self, tmp_test_dir):
        """Test that a missing file raises ConfigError."""
        with pytest.raises(ConfigError, match="file not found"):
            load_options_file(tmp_test_dir / "nonexistent.yaml")

    def test_empty_file_raises(self, tmp_test_dir):
        """Test that an empty file raises ConfigError."""
        path = tmp_test_dir / "empty.yaml"
        path.write_text("")

        with pytest.raises(ConfigError, match="empty"):
            load_options_file(path)

    def test_invalid_yaml_raises(self, tmp_test_dir):
        """Test that a YAML syntax error raises ConfigError."""
        path = tmp_test_dir / "bad.yaml"
        path.write_text("width: [1280\nheight: 800\n")

        with pytest.raises(ConfigError, match="Error parsing YAML"):
            load_options_file(path)

    def test_non_mapping_raises(self, create_yaml_file):
        """Test that a list at the top level raises ConfigError."""
        path = create_yaml_file("list.yaml", ["width", 1280])

        with pytest.raises(ConfigError, match="mapping"):
            load_options_file(path)

    def test_unknown_option_raises(self, create_yaml_file):
        """Test that misspelled options are reported."""
        path = create_yaml_file("typo.yaml", {"widht": 1280, "height": 800})

        with pytest.raises(ConfigError, match="widht"):
            load_options_file(path)


class TestPathResolution:
    """Tests for path resolution relative to the options file."""

    def test_relative_icon_is_resolved(self, tmp_test_dir):
        """Test that icon paths resolve against the file's directory."""
        config_dir = tmp_test_dir / "configs"
        config_dir.mkdir()
        path = config_dir / "defaults.yaml"
        path.write_text("icon: assets/icon.png\n")

        fragment = load_options_file(path)

        assert fragment["icon"] == str((config_dir / "assets" / "icon.png").resolve())

    def test_absolute_icon_is_kept(self, tmp_test_dir):
        """Test that absolute paths are not changed."""
        icon = tmp_test_dir / "icon.png"
        path = tmp_test_dir / "defaults.yaml"
        path.write_text(f"icon: {icon}\n")

        assert load_options_file(path)["icon"] == str(icon)

    def test_single_inject_becomes_list(self, tmp_test_dir):
        """Test that a single inject path is wrapped in a list."""
        path = tmp_test_dir / "defaults.yaml"
        path.write_text("inject: style.css\n")

        fragment = load_options_file(path)

        assert fragment["inject"] == [str((tmp_test_dir / "style.css").resolve())]

    def test_inject_list_is_resolved(self, tmp_test_dir):
        """Test that each inject entry is resolved."""
        path = tmp_test_dir / "defaults.yaml"
        path.write_text("inject:\n  - a.css\n  - scripts/b.js\n")

        fragment = load_options_file(path)

        assert fragment["inject"] == [
            str((tmp_test_dir / "a.css").resolve()),
            str((tmp_test_dir / "scripts" / "b.js").resolve()),
        ]

    def test_non_path_fields_untouched(self, tmp_test_dir):
        """Test that other string options are not treated as paths."""
        path = tmp_test_dir / "defaults.yaml"
        path.write_text("name: assets/not-a-path\n")

        assert load_options_file(path)["name"] == "assets/not-a-path"
