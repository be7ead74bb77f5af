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

"""Public API return types for sitewrap.

All dataclasses are frozen (immutable) to prevent accidental mutation of
return values.

Example:
    Using result types:
        ```python
        from sitewrap.upgrade import find_upgrade_app
        from sitewrap.results import UpgradeAppInfo

        old_app: UpgradeAppInfo | None = find_upgrade_app("./Example-linux-x64")
        if old_app is not None:
            print(old_app.app_resources_dir)
            print(old_app.options.get("target_url"))
        ```

Note:
    Only public API return types belong in this module. Domain types
    (like OptionsFragment) remain co-located with their related logic.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from sitewrap.options.model import OptionsFragment


@dataclass(frozen=True)
class UpgradeAppInfo:
    """A previously generated app, as recovered for an upgrade.

    Never persisted; built fresh by each find_upgrade_app() call.

    Attributes:
        app_resources_dir: Absolute path of the directory that holds the
            app's sitewrap.json.
        options: Options recovered from every source, merged.
    """

    app_resources_dir: Path
    options: OptionsFragment


@dataclass(frozen=True)
class PrepareResult:
    """Result from stamping a copied app template with its options.

    Attributes:
        app_dir: Directory of the prepared app.
        config_path: Path of the written sitewrap.json.
        package_name: Identity slug written to package.json.
        status: Always "success" for a completed preparation.
    """

    app_dir: Path
    config_path: Path
    package_name: str
    status: str
