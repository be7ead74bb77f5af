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

"""App options for sitewrap.

Public API:

- OptionsFragment: Read-only partial set of options from one source
- OPTION_FIELDS: The fixed set of option names
- merge_fragments: Fold fragments, last present value wins
- use_old_app_options: Combine a new invocation with a recovered app
- resolve_user_agent: Keep or infer the app's user agent
"""

from .merge import merge_fragments, normalize_raw_options, use_old_app_options
from .model import OPTION_FIELDS, OptionsFragment, to_camel_case, to_snake_case
from .user_agent import infer_user_agent, resolve_user_agent

__all__ = [
    "OPTION_FIELDS",
    "OptionsFragment",
    "infer_user_agent",
    "merge_fragments",
    "normalize_raw_options",
    "resolve_user_agent",
    "to_camel_case",
    "to_snake_case",
    "use_old_app_options",
]
