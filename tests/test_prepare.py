"""
Tests for sitewrap.build.prepare module.

Tests stamping a copied app template including:
- Which options are persisted to sitewrap.json
- Build metadata
- package.json name (identity slug)
- Reading back a prepared app for an upgrade
- Error handling
"""

from __future__ import annotations

import json

import pytest

from sitewrap import __version__
from sitewrap.build import pick_app_args, prepare_app
from sitewrap.exceptions import PackagingError
from sitewrap.options.model import OptionsFragment
from sitewrap.upgrade import find_upgrade_app


@pytest.fixture
def resolved_options() -> OptionsFragment:
    """Provide options as resolve_app_options would return them."""
    return OptionsFragment(
        name="My App",
        target_url="https://example.com/",
        width=1280,
        height=800,
        single_instance=True,
        electron_version="25.9.8",
        user_agent="Custom/1.0",
        out="/tmp/out",
        icon="/tmp/icon.png",
        inject=["/tmp/style.css"],
        platform="linux",
    )


class TestPickAppArgs:
    """Tests for pick_app_args."""

    def test_persists_app_options_in_camel_case(self, resolved_options):
        """Test that app options are written with camelCase keys."""
        args = pick_app_args(resolved_options, build_date=1700000000000)

        assert args["name"] == "My App"
        assert args["targetUrl"] == "https://example.com/"
        assert args["singleInstance"] is True
        assert args["userAgent"] == "Custom/1.0"

    def test_invocation_options_are_not_persisted(self, resolved_options):
        """Test that paths and build-machine options stay out of the sidecar."""
        args = pick_app_args(resolved_options, build_date=1)

        for key in ("out", "icon", "inject", "platform", "electronVersion", "upgrade"):
            assert key not in args

    def test_build_metadata(self, resolved_options, monkeypatch):
        """Test that build metadata is added."""
        monkeypatch.delenv("OLD_BUILD_WARNING_TEXT", raising=False)

        args = pick_app_args(resolved_options, build_date=1700000000000)

        assert args["buildDate"] == 1700000000000
        assert args["isUpgrade"] is False
        assert args["electronVersionUsed"] == "25.9.8"
        assert args["sitewrapVersion"] == __version__
        assert args["oldBuildWarningText"] == ""

    def test_upgrade_flag(self, resolved_options):
        """Test that isUpgrade follows the upgrade option."""
        args = pick_app_args(resolved_options.with_fields(upgrade=True), build_date=1)

        assert args["isUpgrade"] is True

    def test_old_build_warning_from_environment(self, resolved_options, monkeypatch):
        """Test that redistributors can set the old build warning text."""
        monkeypatch.setenv("OLD_BUILD_WARNING_TEXT", "Please update from our portal")

        args = pick_app_args(resolved_options, build_date=1)

        assert args["oldBuildWarningText"] == "Please update from our portal"

    def test_build_date_defaults_to_now(self, resolved_options):
        """Test that buildDate is a millisecond timestamp when not given."""
        args = pick_app_args(resolved_options)

        assert isinstance(args["buildDate"], int)
        assert args["buildDate"] > 1_600_000_000_000


class TestPrepareApp:
    """Tests for prepare_app."""

    def test_writes_sidecar_and_package_name(self, app_template, resolved_options):
        """Test that both files are stamped."""
        result = prepare_app(app_template, resolved_options, build_date=42)

        assert result.status == "success"
        assert result.package_name == "my-app-sitewrap-182cce"
        assert result.config_path == app_template / "sitewrap.json"

        sidecar = json.loads(result.config_path.read_text(encoding="utf-8"))
        assert sidecar["buildDate"] == 42
        assert sidecar["width"] == 1280

        package_json = json.loads((app_template / "package.json").read_text())
        assert package_json["name"] == "my-app-sitewrap-182cce"
        assert package_json["main"] == "lib/main.js"

    @pytest.mark.integration
    def test_prepared_app_reads_back(self, app_template, resolved_options):
        """Test that an upgrade recovers what prepare wrote."""
        prepare_app(app_template, resolved_options, build_date=42)

        old_app = find_upgrade_app(app_template)

        assert old_app is not None
        assert old_app.options["name"] == "My App"
        assert old_app.options["target_url"] == "https://example.com/"
        assert old_app.options["width"] == 1280
        assert old_app.options["single_instance"] is True
        assert old_app.options["electron_version_used"] == "25.9.8"

    def test_missing_app_dir_raises(self, tmp_test_dir, resolved_options):
        """Test that a missing staging directory is rejected."""
        with pytest.raises(PackagingError, match="not found"):
            prepare_app(tmp_test_dir / "missing", resolved_options)

    def test_missing_name_raises(self, app_template):
        """Test that name and target_url are required."""
        options = OptionsFragment(target_url="https://example.com/")

        with pytest.raises(PackagingError, match="required"):
            prepare_app(app_template, options)

    def test_missing_package_json_raises(self, tmp_test_dir, resolved_options):
        """Test that a template without package.json is rejected."""
        app_dir = tmp_test_dir / "app"
        app_dir.mkdir()

        with pytest.raises(PackagingError, match="package.json"):
            prepare_app(app_dir, resolved_options)

    def test_invalid_package_json_raises(self, app_template, resolved_options):
        """Test that a corrupt package.json is rejected."""
        (app_template / "package.json").write_text("{", encoding="utf-8")

        with pytest.raises(PackagingError, match="Invalid package.json"):
            prepare_app(app_template, resolved_options)
