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

"""Option extractors for previously generated apps.

Each extractor reads one source inside (or next to) an app's resources
directory and returns an OptionsFragment. A missing source is never an
error: the extractor returns an empty fragment, or leaves its field absent.

Sources (paths relative to the resources directory, i.e. the folder holding
sitewrap.json):

    sitewrap.json           Full snapshot of the options used to generate
                            the app. Base of the merge.
    ../../Info.plist        macOS bundle descriptor (darwin/mas builds only).
    ../electron.icns        macOS icon.
    icon.ico, icon.png      Windows / Linux icons.
    inject/                 Injected .css / .js files.
    ../electron.asar        Present when the app was packed into an archive.

Error Handling:
    - MalformedSourceError: sitewrap.json or Info.plist exists but cannot be
      parsed. Chained with 'from err'.
    - OSError: propagated untouched (permission denied and similar).
    - A single field with an unexpected type is dropped (absent); the rest
      of the source is still used.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
import plistlib
import stat
from typing import Any
from xml.parsers.expat import ExpatError

from sitewrap.exceptions import MalformedSourceError
from sitewrap.options.model import OptionsFragment

from .locator import SIDECAR_FILENAME

INFO_PLIST_RELATIVE = Path("..", "..", "Info.plist")
ASAR_SENTINEL_RELATIVE = Path("..", "electron.asar")
ICON_CANDIDATES: tuple[Path, ...] = (
    Path("..", "electron.icns"),
    Path("icon.ico"),
    Path("icon.png"),
)
INJECT_DIRNAME = "inject"
INJECT_EXTENSIONS = (".css", ".js")

# electron-packager writes this when no app version was given
PLACEHOLDER_APP_VERSION = "1.0.0"

# plistlib raises these on malformed values inside an otherwise valid document
_PLIST_ERRORS = (
    plistlib.InvalidFileException,
    ExpatError,
    ValueError,
    TypeError,
    AttributeError,
    OverflowError,
    IndexError,
    KeyError,
)


def _stat(path: Path) -> os.stat_result | None:
    """Return the stat of path, or None if it does not exist.

    Unlike Path.is_file(), other OSErrors (permission denied) propagate.
    """
    try:
        return path.stat()
    except (FileNotFoundError, NotADirectoryError):
        return None


def _is_file(path: Path) -> bool:
    st = _stat(path)
    return st is not None and stat.S_ISREG(st.st_mode)


def _is_dir(path: Path) -> bool:
    st = _stat(path)
    return st is not None and stat.S_ISDIR(st.st_mode)


def read_sidecar_options(app_resources_dir: Path) -> OptionsFragment:
    """Load the sidecar snapshot (sitewrap.json) of a generated app.

    Args:
        app_resources_dir: Directory containing sitewrap.json.

    Returns:
        Fragment with every recognized option in the file. Unknown keys are
            ignored.

    Raises:
        FileNotFoundError: If sitewrap.json does not exist.
        MalformedSourceError: If the file is not valid JSON or its top level
            is not an object.
    """
    from sitewrap.logging import get_global_logger

    logger = get_global_logger()
    sidecar_path = app_resources_dir / SIDECAR_FILENAME
    logger.verbose("UPGRADE", f"Loading {sidecar_path}")

    try:
        with sidecar_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as err:
        raise MalformedSourceError(
            f"Error parsing {SIDECAR_FILENAME}: {sidecar_path}: {err}"
        ) from err
    except UnicodeDecodeError as err:
        raise MalformedSourceError(
            f"{SIDECAR_FILENAME} is not UTF-8 text: {sidecar_path}"
        ) from err

    if not isinstance(data, dict):
        raise MalformedSourceError(
            f"Top-level {SIDECAR_FILENAME} content must be an object: {sidecar_path}"
        )

    fragment = OptionsFragment.from_sidecar(data)
    logger.debug("UPGRADE", f"Sidecar provided {len(fragment)} option(s)")
    return fragment


def _plist_string(plist: dict[str, Any], key: str) -> str | None:
    value = plist.get(key)
    return value if isinstance(value, str) else None


def _plist_bool(plist: dict[str, Any], key: str) -> bool | None:
    value = plist.get(key)
    return value if isinstance(value, bool) else None


def read_info_plist_options(app_resources_dir: Path) -> OptionsFragment:
    """Recover macOS-only options from the bundle's Info.plist.

    Extracted fields:

    - app_copyright from NSHumanReadableCopyright
    - app_version from CFBundleVersion, except the placeholder "1.0.0",
      which means the version was never set and is left absent
    - darwin_dark_mode_support from NSRequiresAquaSystemAppearance. The
      plist stores the opposite flag ("requires the light appearance"), so
      the value is inverted. A missing key leaves the field absent rather
      than defaulting to True.

    Args:
        app_resources_dir: Directory containing sitewrap.json.

    Returns:
        Fragment with the fields above, or an empty fragment when there is
            no Info.plist (Windows and Linux apps).

    Raises:
        MalformedSourceError: If Info.plist exists but cannot be parsed.
    """
    from sitewrap.logging import get_global_logger

    logger = get_global_logger()
    plist_path = app_resources_dir / INFO_PLIST_RELATIVE
    if not _is_file(plist_path):
        logger.debug("UPGRADE", "No Info.plist found; not a macOS app")
        return OptionsFragment()

    with plist_path.open("rb") as f:
        try:
            plist = plistlib.load(f)
        except _PLIST_ERRORS as err:
            raise MalformedSourceError(
                f"Error parsing Info.plist: {plist_path}: {err}"
            ) from err

    if not isinstance(plist, dict):
        raise MalformedSourceError(f"Info.plist root must be a dictionary: {plist_path}")

    fields: dict[str, Any] = {}

    app_copyright = _plist_string(plist, "NSHumanReadableCopyright")
    logger.debug("UPGRADE", f"Extracted app copyright from Info.plist: {app_copyright}")
    if app_copyright is not None:
        fields["app_copyright"] = app_copyright

    bundle_version = _plist_string(plist, "CFBundleVersion")
    logger.debug("UPGRADE", f"Extracted bundle version from Info.plist: {bundle_version}")
    if bundle_version is not None and bundle_version != PLACEHOLDER_APP_VERSION:
        fields["app_version"] = bundle_version

    requires_aqua = _plist_bool(plist, "NSRequiresAquaSystemAppearance")
    if requires_aqua is not None:
        fields["darwin_dark_mode_support"] = not requires_aqua
    logger.debug(
        "UPGRADE",
        "Extracted dark mode support from Info.plist: "
        f"{fields.get('darwin_dark_mode_support', 'unset')}",
    )

    return OptionsFragment(fields)


def get_icon_path(app_resources_dir: Path) -> OptionsFragment:
    """Find the app icon by fixed file conventions.

    Candidates, first existing wins: ../electron.icns, icon.ico, icon.png.

    Args:
        app_resources_dir: Directory containing sitewrap.json.

    Returns:
        Fragment with ``icon`` set to the absolute icon path, or empty.
    """
    from sitewrap.logging import get_global_logger

    logger = get_global_logger()
    for candidate in ICON_CANDIDATES:
        icon_path = app_resources_dir / candidate
        if _is_file(icon_path):
            resolved = icon_path.resolve()
            logger.verbose("UPGRADE", f"Found icon at: {resolved}")
            return OptionsFragment(icon=str(resolved))

    logger.verbose("UPGRADE", "Could not find icon file")
    return OptionsFragment()


def get_inject_paths(app_resources_dir: Path) -> OptionsFragment:
    """List the CSS/JS files injected into the app.

    Args:
        app_resources_dir: Directory containing sitewrap.json.

    Returns:
        Fragment with ``inject`` set to the sorted absolute paths of regular
            .css/.js files (extension matched case-insensitively; possibly
            an empty list), or an empty fragment if there is no inject/
            folder.
    """
    from sitewrap.logging import get_global_logger

    logger = get_global_logger()
    inject_dir = app_resources_dir / INJECT_DIRNAME
    if not _is_dir(inject_dir):
        return OptionsFragment()

    inject_paths = []
    with os.scandir(inject_dir) as entries:
        for entry in entries:
            if not entry.is_file(follow_symlinks=False):
                continue
            if entry.name.lower().endswith(INJECT_EXTENSIONS):
                inject_paths.append(str((inject_dir / entry.name).resolve()))
    inject_paths.sort()

    logger.verbose("UPGRADE", f"CSS/JS inject paths: {', '.join(inject_paths)}")
    return OptionsFragment(inject=inject_paths)


def read_asar_option(app_resources_dir: Path) -> OptionsFragment:
    """Detect whether the app was packed into an asar archive.

    Args:
        app_resources_dir: Directory containing sitewrap.json.

    Returns:
        Fragment with ``asar=True`` if ../electron.asar exists, else empty.
    """
    from sitewrap.logging import get_global_logger

    logger = get_global_logger()
    is_asar = _is_file(app_resources_dir / ASAR_SENTINEL_RELATIVE)
    logger.debug("UPGRADE", f"Is this app an asar? {'Yes' if is_asar else 'No'}")
    return OptionsFragment(asar=True) if is_asar else OptionsFragment()
