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

"""Exception hierarchy for sitewrap.

This module defines a custom exception hierarchy that allows library users
to distinguish between different types of errors:

- ConfigError: Option-related errors (YAML parse, unknown option names,
  upgrade requested for a path that holds no generated app)
- MalformedSourceError: A structured file of a previously generated app
  exists but cannot be parsed (corrupt sitewrap.json or Info.plist)
- PackagingError: App preparation errors (missing or corrupt package.json)

All exceptions inherit from SitewrapError, allowing users to catch all
sitewrap errors with a single except clause if needed.

Filesystem failures such as permission errors are NOT wrapped; they
propagate as the original OSError so that they are never confused with a
source that is simply absent.

Example:
    Catching specific error types:
        ```python
        from sitewrap.upgrade import find_upgrade_app
        from sitewrap.exceptions import MalformedSourceError

        try:
            old_app = find_upgrade_app("~/Apps/Example-linux-x64")
        except MalformedSourceError as e:
            print(f"Cannot read previous app: {e}")
        ```

    Catching all sitewrap errors:
        ```python
        from sitewrap.exceptions import SitewrapError

        try:
            options = resolve_app_options(raw, upgrade_from=path)
        except SitewrapError as e:
            print(f"sitewrap error: {e}")
        ```
"""

from __future__ import annotations

__all__ = [
    "SitewrapError",
    "ConfigError",
    "MalformedSourceError",
    "PackagingError",
]


class SitewrapError(Exception):
    """Base exception for all sitewrap errors.

    All sitewrap-specific exceptions inherit from this class, allowing users
    to catch all sitewrap errors with a single except clause if needed.
    """

    pass


class ConfigError(SitewrapError):
    """Raised for option and configuration errors.

    This exception is raised when there are problems with:

    - YAML parsing of an options file (syntax errors, invalid structure)
    - Unknown option names
    - Missing required options (e.g., no target URL)
    - An upgrade requested for a path with no previously generated app
    """

    pass


class MalformedSourceError(ConfigError):
    """Raised when a previously generated app has an unreadable source file.

    The file exists (so the source is not merely absent) but fails to
    parse. Upgrade resolution is aborted rather than continuing with a
    partial, possibly wrong, app identity.

    Example:
        Detecting a corrupt sidecar file:
            ```python
            from sitewrap.exceptions import MalformedSourceError

            try:
                fragment = read_sidecar_options(resources_dir)
            except MalformedSourceError as e:
                print(f"Corrupt app config: {e}")
            ```
    """

    pass


class PackagingError(SitewrapError):
    """Raised for app preparation errors.

    This exception is raised when there are problems with:

    - Missing or unparsable package.json in the app template
    - Writing the sidecar config into the prepared app
    """

    pass
