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

"""App preparation for sitewrap.

After the Electron app template has been copied into a staging directory,
two files are stamped with the resolved options before packaging:

- sitewrap.json: the sidecar snapshot that a later upgrade reads back
  (see sitewrap.upgrade). It is the marker that identifies the app's
  resources directory.
- package.json: its ``name`` is set to the identity slug, which decides
  the app's user-data directory.

Private Helpers:
    - _read_package_json: Load package.json with error handling

Design Principles:
    - The sidecar stores options, not paths into the staging directory
      (icon and inject are recovered by file convention instead)
    - Absent options are omitted from the sidecar, never written as null
    - Only this module writes sitewrap.json; upgrade resolution only reads

Example:
    from pathlib import Path
    from sitewrap.build import prepare_app
    from sitewrap.options import OptionsFragment

    result = prepare_app(
        Path("staging/app"),
        OptionsFragment(name="Example", target_url="https://example.com/"),
    )
    print(result.package_name)  # example-sitewrap-<hash>
"""

from __future__ import annotations

import json
import os
from pathlib import Path
import time
from typing import Any

from sitewrap.exceptions import PackagingError
from sitewrap.naming import normalize_app_name
from sitewrap.options.model import OPTION_FIELDS, OptionsFragment, to_camel_case
from sitewrap.results import PrepareResult
from sitewrap.upgrade.locator import SIDECAR_FILENAME

# Options that describe this invocation or its inputs, not the app itself
_NOT_PERSISTED = frozenset(
    {
        "bookmarks_menu",
        "build_date",
        "electron_version",
        "electron_version_used",
        "icon",
        "inject",
        "is_upgrade",
        "old_build_warning_text",
        "out",
        "overwrite",
        "platform",
        "sitewrap_version",
        "upgrade",
    }
)

PERSISTED_FIELDS: tuple[str, ...] = tuple(
    name for name in OPTION_FIELDS if name not in _NOT_PERSISTED
)

OLD_BUILD_WARNING_ENV = "OLD_BUILD_WARNING_TEXT"


def pick_app_args(
    options: OptionsFragment, *, build_date: int | None = None
) -> dict[str, Any]:
    """Select the options stored in an app's sitewrap.json.

    Args:
        options: Resolved app options.
        build_date: Build time in milliseconds since the epoch. Default is
            now.

    Returns:
        camelCase mapping ready to be serialized as JSON. Includes build
            metadata (buildDate, isUpgrade, electronVersionUsed,
            sitewrapVersion, oldBuildWarningText).
    """
    from sitewrap import __version__

    picked = {
        to_camel_case(name): options[name] for name in PERSISTED_FIELDS if name in options
    }
    picked["buildDate"] = build_date if build_date is not None else int(time.time() * 1000)
    picked["isUpgrade"] = bool(options.get("upgrade", False))
    if "electron_version" in options:
        picked["electronVersionUsed"] = options["electron_version"]
    picked["sitewrapVersion"] = __version__
    # Lets redistributors replace the "this app is old" text with their own
    picked["oldBuildWarningText"] = os.environ.get(OLD_BUILD_WARNING_ENV, "")
    return picked


def write_app_config(
    app_dir: Path, options: OptionsFragment, *, build_date: int | None = None
) -> Path:
    """Write sitewrap.json into the prepared app directory.

    Args:
        app_dir: Staging directory of the app (becomes resources/app).
        options: Resolved app options.
        build_date: Passed to pick_app_args().

    Returns:
        Path of the written file.

    Raises:
        PackagingError: If the file cannot be written.
    """
    from sitewrap.logging import get_global_logger

    logger = get_global_logger()
    config_path = app_dir / SIDECAR_FILENAME
    logger.verbose("BUILD", f"Writing app config to {config_path}")
    payload = pick_app_args(options, build_date=build_date)
    try:
        with config_path.open("w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
            f.write("\n")
    except OSError as err:
        raise PackagingError(f"Failed to write {config_path}: {err}") from err
    return config_path


def _read_package_json(package_json_path: Path) -> dict[str, Any]:
    if not package_json_path.is_file():
        raise PackagingError(f"package.json not found in app template: {package_json_path}")
    try:
        with package_json_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as err:
        raise PackagingError(f"Invalid package.json: {package_json_path}: {err}") from err
    if not isinstance(data, dict):
        raise PackagingError(f"package.json must contain an object: {package_json_path}")
    return data


def change_app_package_json_name(app_dir: Path, name: str, url: str) -> str:
    """Set package.json ``name`` to the app's identity slug.

    Args:
        app_dir: Staging directory of the app.
        name: App display name.
        url: App target URL.

    Returns:
        The slug that was written.

    Raises:
        PackagingError: If package.json is missing or invalid.
    """
    from sitewrap.logging import get_global_logger

    logger = get_global_logger()
    package_json_path = app_dir / "package.json"
    package_json = _read_package_json(package_json_path)
    slug = normalize_app_name(name, url)
    package_json["name"] = slug
    logger.verbose("BUILD", f"Updating {package_json_path} 'name' field to {slug}")

    with package_json_path.open("w", encoding="utf-8") as f:
        json.dump(package_json, f, indent=2)
        f.write("\n")
    return slug


def prepare_app(
    app_dir: Path, options: OptionsFragment, *, build_date: int | None = None
) -> PrepareResult:
    """Stamp a copied app template with its options and identity.

    Args:
        app_dir: Staging directory holding the copied template.
        options: Resolved app options; must include name and target_url.
        build_date: Passed to pick_app_args().

    Returns:
        Paths written and the identity slug.

    Raises:
        PackagingError: If app_dir does not exist, name or target_url is
            missing, or package.json is missing or invalid.
    """
    app_dir = Path(app_dir)
    if not app_dir.is_dir():
        raise PackagingError(f"App directory not found: {app_dir}")

    name = options.get("name")
    target_url = options.get("target_url")
    if not name or not target_url:
        raise PackagingError("Both 'name' and 'target_url' are required to prepare an app")

    config_path = write_app_config(app_dir, options, build_date=build_date)
    package_name = change_app_package_json_name(app_dir, str(name), str(target_url))

    return PrepareResult(
        app_dir=app_dir,
        config_path=config_path,
        package_name=package_name,
        status="success",
    )
