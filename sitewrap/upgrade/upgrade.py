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

"""Recover the options of a previously generated app.

find_upgrade_app() locates the app's resources directory, runs every
extractor against it, and merges the fragments (weakest first):

  1. sitewrap.json        snapshot written when the app was generated
  2. executable           name / win32metadata from the built binary
  3. Info.plist           copyright, version, dark mode (macOS only)
  4. electron.asar        archive packing
  5. icon                 icon file by convention
  6. inject/              injected CSS/JS files

The sidecar is the base because it is the most complete source; the others
are read from the built app itself and reflect later hand edits.
"""

from __future__ import annotations

from pathlib import Path

from sitewrap.options.merge import merge_fragments
from sitewrap.results import UpgradeAppInfo

from .executable import read_executable_options
from .extractors import (
    get_icon_path,
    get_inject_paths,
    read_asar_option,
    read_info_plist_options,
    read_sidecar_options,
)
from .locator import find_app_resources_dir


def find_upgrade_app(upgrade_from: str | Path) -> UpgradeAppInfo | None:
    """Find a previously generated app and recover its options.

    Args:
        upgrade_from: Path given to --upgrade. May be the app folder, the
            executable, the resources directory, or any ancestor.

    Returns:
        The app's resources directory and merged options, or None if no
            sitewrap.json exists at or below upgrade_from.

    Raises:
        MalformedSourceError: If sitewrap.json or Info.plist cannot be
            parsed.
        OSError: On filesystem errors (missing path, permission denied).

    Example:
        >>> old_app = find_upgrade_app("dist/Example-linux-x64")
        >>> old_app.options["target_url"]
        'https://example.com/'
    """
    from sitewrap.logging import get_global_logger

    logger = get_global_logger()
    app_resources_dir = find_app_resources_dir(upgrade_from)
    if app_resources_dir is None:
        return None

    sidecar = read_sidecar_options(app_resources_dir)
    fragments = [
        sidecar,
        read_executable_options(app_resources_dir, sidecar),
        read_info_plist_options(app_resources_dir),
        read_asar_option(app_resources_dir),
        get_icon_path(app_resources_dir),
        get_inject_paths(app_resources_dir),
    ]
    logger.debug("UPGRADE", f"Merging {len(fragments)} option source(s)")

    return UpgradeAppInfo(
        app_resources_dir=app_resources_dir,
        options=merge_fragments(fragments),
    )
