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

"""Upgrade resolution for sitewrap.

Regenerating an app must keep its identity (name and URL, hence its data
directory) and the options it was built with. This package recovers those
options from a previously generated app on disk.

Public API:

find_upgrade_app : function
    Locate a generated app and return its merged options.
find_app_resources_dir : function
    Locate the directory holding sitewrap.json.

Example:
    from sitewrap.upgrade import find_upgrade_app

    old_app = find_upgrade_app("dist/Example-linux-x64")
    if old_app is None:
        print("Nothing to upgrade")
    else:
        print(old_app.options.to_dict())
"""

from .locator import SIDECAR_FILENAME, find_app_resources_dir
from .upgrade import find_upgrade_app

__all__ = ["SIDECAR_FILENAME", "find_app_resources_dir", "find_upgrade_app"]
