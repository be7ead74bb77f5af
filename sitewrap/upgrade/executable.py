# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Recover options from a generated app's built executable.

The app root is two levels above the resources directory
(``<root>/resources/app`` on Windows and Linux, ``<X>.app/Contents/Resources/app``
on macOS). What can be learned from the root depends on the platform the
app was built for, so each platform has an inspector:

- darwin: ``Contents/MacOS/<executable>``; the executable is named after the
  app.
- win32: ``<root>/<executable>.exe``; the file name gives the app name and
  the version resource strings give win32metadata.
- linux: ``<root>/<executable>`` next to Electron's shared libraries.

Inspectors are Protocol classes registered by name at import time, and the
first one whose ``matches()`` accepts the app root is used. A root that no inspector
recognizes yields an empty fragment, so callers never special-case
unsupported platforms.

The executable name only fills ``name`` when the sidecar has none. The
name feeds the identity slug, and a file name that was sanitized or
renamed by hand would otherwise give the upgraded app a new data
directory.

Example:
    Registering an inspector for another layout:
        ```python
        from sitewrap.upgrade.executable import register_inspector

        class FreeBsdInspector:
            def matches(self, app_root):
                return (app_root / "libffmpeg.so").exists()

            def inspect(self, app_root, prior):
                return OptionsFragment()

        register_inspector("freebsd", FreeBsdInspector)
        ```
"""

from __future__ import annotations

import os
from pathlib import Path
import re
import struct
from typing import Protocol

from sitewrap.options.model import OptionsFragment

APP_ROOT_RELATIVE = Path("..", "..")

WIN32_METADATA_KEYS: tuple[str, ...] = (
    "CompanyName",
    "FileDescription",
    "OriginalFilename",
    "ProductName",
    "InternalName",
)

# Executables shipped by Electron itself, never the app's own binary
_ELECTRON_HELPERS = frozenset(
    {
        "chrome-sandbox",
        "chrome_crashpad_handler",
        "crashpad_handler",
        "squirrel.exe",
        "update.exe",
    }
)

_VERSION_VALUE = re.compile(rb"((?:[^\x00].|\x00[^\x00])*?)\x00\x00", re.DOTALL)
_STRING_HEADER = struct.Struct("<HHH")
_STRING_TYPE_TEXT = 1


class ExecutableInspector(Protocol):
    """Protocol for per-platform executable inspectors."""

    def matches(self, app_root: Path) -> bool:
        """Return True if app_root looks like an app built for this platform.

        Args:
            app_root: Directory two levels above the resources directory.
        """
        ...

    def inspect(self, app_root: Path, prior: OptionsFragment) -> OptionsFragment:
        """Extract options from the platform's executable.

        Args:
            app_root: Directory two levels above the resources directory.
            prior: Options already recovered from the sidecar file.

        Returns:
            Fragment with only the fields this platform can provide.
        """
        ...


_INSPECTOR_REGISTRY: dict[str, type[ExecutableInspector]] = {}


def register_inspector(name: str, inspector_class: type[ExecutableInspector]) -> None:
    """Register an executable inspector by name.

    Registering the same name twice replaces the previous registration
    (allows monkey-patching for tests). Inspectors are tried in
    registration order.
    """
    _INSPECTOR_REGISTRY[name] = inspector_class


def get_inspector(app_root: Path) -> ExecutableInspector | None:
    """Return an inspector instance for app_root, or None if unsupported."""
    for inspector_class in _INSPECTOR_REGISTRY.values():
        inspector = inspector_class()
        if inspector.matches(app_root):
            return inspector
    return None


def _name_if_missing(prior: OptionsFragment, executable: Path) -> dict[str, str]:
    if prior.get("name"):
        return {}
    if executable.suffix.lower() == ".exe":
        return {"name": executable.stem}
    return {"name": executable.name}


def _regular_files(directory: Path) -> list[Path]:
    with os.scandir(directory) as entries:
        names = sorted(e.name for e in entries if e.is_file(follow_symlinks=False))
    return [directory / name for name in names]


def _read_string_entry(exe_bytes: bytes, key_offset: int, key_length: int) -> str | None:
    """Decode the String entry whose szKey starts at key_offset.

    Returns None when the bytes before the key are not a String header
    (wLength, wValueLength, wType=1 on a 32-bit boundary) that agrees with
    the value that follows. Such hits are wide-string literals elsewhere in
    the binary, not version resources.
    """
    header_start = key_offset - _STRING_HEADER.size
    if header_start < 0 or header_start % 4:
        return None
    _length, value_length, value_type = _STRING_HEADER.unpack_from(exe_bytes, header_start)
    if value_type != _STRING_TYPE_TEXT:
        return None

    value_start = key_offset + key_length
    value_start += (-value_start) % 4
    match = _VERSION_VALUE.match(exe_bytes, value_start)
    if match is None:
        return None
    raw = match.group(1)
    # wValueLength counts UTF-16 units, with or without the terminator
    if value_length not in (len(raw) // 2, len(raw) // 2 + 1):
        return None
    try:
        return raw.decode("utf-16-le")
    except UnicodeDecodeError:
        return None


def read_version_strings(exe_bytes: bytes, keys: tuple[str, ...]) -> dict[str, str]:
    """Read StringFileInfo values from a Windows executable's bytes.

    Each String entry of a VS_VERSIONINFO resource is a header (wLength,
    wValueLength, wType), the UTF-16LE key with a NUL terminator, padding
    to a 32-bit boundary and the UTF-16LE value with its own terminator.
    Keys are located by scanning, so no PE section parsing is needed; a
    hit only counts when a matching String header precedes it.

    Args:
        exe_bytes: Contents of the .exe file.
        keys: String names to look up (e.g., "CompanyName").

    Returns:
        Mapping of the keys that were found to their non-empty values.
            Keys that are missing or undecodable are left out.
    """
    found: dict[str, str] = {}
    for key in keys:
        needle = key.encode("utf-16-le") + b"\x00\x00"
        index = exe_bytes.find(needle)
        while index >= 0:
            value = _read_string_entry(exe_bytes, index, len(needle))
            if value is not None:
                if value:
                    found[key] = value
                break
            index = exe_bytes.find(needle, index + 1)
    return found


class DarwinInspector:
    """Inspector for macOS (.app bundle) builds."""

    def matches(self, app_root: Path) -> bool:
        return (app_root / "MacOS").is_dir()

    def inspect(self, app_root: Path, prior: OptionsFragment) -> OptionsFragment:
        executables = _regular_files(app_root / "MacOS")
        if not executables:
            return OptionsFragment()
        return OptionsFragment(_name_if_missing(prior, executables[0]))


class Win32Inspector:
    """Inspector for Windows builds."""

    def _executable(self, app_root: Path) -> Path | None:
        for path in _regular_files(app_root):
            name = path.name.lower()
            if name.endswith(".exe") and name not in _ELECTRON_HELPERS:
                return path
        return None

    def matches(self, app_root: Path) -> bool:
        return self._executable(app_root) is not None

    def inspect(self, app_root: Path, prior: OptionsFragment) -> OptionsFragment:
        from sitewrap.logging import get_global_logger

        logger = get_global_logger()
        executable = self._executable(app_root)
        if executable is None:
            return OptionsFragment()

        fields: dict[str, object] = dict(_name_if_missing(prior, executable))
        metadata = read_version_strings(executable.read_bytes(), WIN32_METADATA_KEYS)
        logger.debug("UPGRADE", f"Version strings in {executable.name}: {metadata}")
        if metadata:
            fields["win32metadata"] = metadata
        return OptionsFragment(fields)


class LinuxInspector:
    """Inspector for Linux builds."""

    def matches(self, app_root: Path) -> bool:
        return any(p.name.endswith(".so") for p in _regular_files(app_root))

    def inspect(self, app_root: Path, prior: OptionsFragment) -> OptionsFragment:
        for path in _regular_files(app_root):
            if (
                "." not in path.name
                and path.name not in _ELECTRON_HELPERS
                and os.access(path, os.X_OK)
            ):
                return OptionsFragment(_name_if_missing(prior, path))
        return OptionsFragment()


register_inspector("darwin", DarwinInspector)
register_inspector("win32", Win32Inspector)
register_inspector("linux", LinuxInspector)


def read_executable_options(
    app_resources_dir: Path, prior: OptionsFragment
) -> OptionsFragment:
    """Recover platform-specific options from the app's executable.

    Args:
        app_resources_dir: Directory containing sitewrap.json.
        prior: Options read from the sidecar file.

    Returns:
        Fragment filled by the matching platform inspector, or an empty
            fragment when the layout is not recognized.
    """
    from sitewrap.logging import get_global_logger

    logger = get_global_logger()
    app_root = (app_resources_dir / APP_ROOT_RELATIVE).resolve()
    if not app_root.is_dir():
        return OptionsFragment()

    inspector = get_inspector(app_root)
    if inspector is None:
        logger.verbose("UPGRADE", f"Unrecognized app layout in {app_root}")
        return OptionsFragment()

    logger.verbose("UPGRADE", f"Inspecting executable with {type(inspector).__name__}")
    return inspector.inspect(app_root, prior)
