"""
Pytest configuration and shared fixtures for sitewrap tests.

This module provides reusable fixtures and test utilities used across
the test suite, mostly factories that lay out the directory trees of
generated apps the way electron-packager does.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import pytest
import yaml

from sitewrap.logging import SilentLogger, set_global_logger


@pytest.fixture(autouse=True)
def silent_global_logger():
    """Reset the global logger so one test's logger never leaks into another."""
    set_global_logger(SilentLogger())
    yield
    set_global_logger(SilentLogger())


@pytest.fixture
def tmp_test_dir(tmp_path: Path) -> Path:
    """
    Provide a temporary directory for test artifacts.

    Automatically cleaned up after test completion.
    """
    return tmp_path


@pytest.fixture
def sample_sidecar_data() -> dict[str, Any]:
    """
    Provide the sitewrap.json content of a typical generated app.

    Keys are camelCase, as written by the build step.
    """
    return {
        "name": "Example",
        "targetUrl": "https://example.com/",
        "width": 1280,
        "height": 800,
        "singleInstance": True,
        "internalUrls": ".*?\\.example\\.com.*?",
        "buildDate": 1700000000000,
        "isUpgrade": False,
        "sitewrapVersion": "0.1.0",
    }


@pytest.fixture
def write_sidecar():
    """
    Factory fixture for writing a sitewrap.json file.

    Usage:
        write_sidecar(resources_dir, {"name": "Foo"})
    """

    def _write(directory: Path, data: Any) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / "sitewrap.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_linux_app(tmp_test_dir: Path, write_sidecar):
    """
    Factory fixture for a Linux build layout.

    Layout:
        <root>/<executable>
        <root>/libffmpeg.so
        <root>/resources/app/sitewrap.json

    Returns the app resources directory.
    """

    def _create(
        sidecar: dict[str, Any],
        root_name: str = "Example-linux-x64",
        executable: str | None = "Example",
    ) -> Path:
        root = tmp_test_dir / root_name
        resources = root / "resources" / "app"
        write_sidecar(resources, sidecar)
        (root / "libffmpeg.so").write_bytes(b"\x7fELF")
        if executable:
            exe = root / executable
            exe.write_bytes(b"\x7fELF")
            os.chmod(exe, 0o755)
        return resources

    return _create


@pytest.fixture
def make_darwin_app(tmp_test_dir: Path, write_sidecar):
    """
    Factory fixture for a macOS .app bundle layout.

    Layout:
        <X>.app/Contents/Info.plist (optional)
        <X>.app/Contents/MacOS/<executable>
        <X>.app/Contents/Resources/app/sitewrap.json

    Returns the app resources directory.
    """

    def _create(
        sidecar: dict[str, Any],
        executable: str = "Example",
        plist_bytes: bytes | None = None,
    ) -> Path:
        contents = tmp_test_dir / "Example-darwin-x64" / "Example.app" / "Contents"
        resources = contents / "Resources" / "app"
        write_sidecar(resources, sidecar)
        (contents / "MacOS").mkdir(parents=True)
        (contents / "MacOS" / executable).write_bytes(b"\xcf\xfa\xed\xfe")
        if plist_bytes is not None:
            (contents / "Info.plist").write_bytes(plist_bytes)
        return resources

    return _create


@pytest.fixture
def create_yaml_file(tmp_test_dir: Path):
    """
    Factory fixture for creating temporary YAML files.

    Usage:
        yaml_path = create_yaml_file("defaults.yaml", {"width": 1280})
    """

    def _create(filename: str, data: Any) -> Path:
        path = tmp_test_dir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f)
        return path

    return _create


@pytest.fixture
def app_template(tmp_test_dir: Path) -> Path:
    """Provide a staged copy of the Electron app template."""
    app_dir = tmp_test_dir / "staging" / "app"
    app_dir.mkdir(parents=True)
    package_json = {
        "name": "sitewrap-placeholder",
        "version": "1.0.0",
        "main": "lib/main.js",
    }
    (app_dir / "package.json").write_text(json.dumps(package_json), encoding="utf-8")
    return app_dir


@pytest.fixture
def electron_releases() -> list[dict[str, Any]]:
    """Provide a trimmed copy of the Electron releases feed."""
    return [
        {"version": "26.2.1", "chrome": "116.0.5845.188", "node": "18.16.1"},
        {"version": "25.9.8", "chrome": "114.0.5735.289", "node": "18.15.0"},
        {"version": "22.3.27", "chrome": "108.0.5359.215", "node": "16.17.1"},
    ]
