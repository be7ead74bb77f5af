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

"""Options file loading for sitewrap.

Public API:

- load_options_file: Load a YAML file of default options

Example:
    Basic usage:

        from pathlib import Path
        from sitewrap.config import load_options_file

        defaults = load_options_file(Path("defaults.yaml"))
        print(defaults.get("width"))

"""

from .loader import load_options_file

__all__ = ["load_options_file"]
